# Overview: Flask API routes for analytics; parses input and returns JSON responses.

from flask import Blueprint, jsonify

from ..decorators import require_action
from ..permissions import Action
from ..services import reporting_service


analytics_bp = Blueprint("analytics", __name__, url_prefix="/api/analytics")


@analytics_bp.get("")
@require_action(Action.VIEW_ANALYTICS)
def analytics_summary_route():
    return jsonify(reporting_service.analytics_summary())
