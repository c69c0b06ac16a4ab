# Overview: Flask API routes for registration and credential issuance.

# backend/garments/routes/auth.py
"""
Authentication API routes

Registration is an idempotent upsert keyed by email. Login and registration
both issue a signed bearer credential, returned in the body and set as an
httpOnly cookie; logout clears the cookie.
"""

from flask import Blueprint, request, jsonify

from ..errors import ValidationError
from ..services import account_service, credential_service


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/register")
def register_route():
    """
    Register an account, or refresh the profile of an existing one.

    Request body:
    - email: str (required)
    - name: str
    - photo_url: str
    - role: admin | manager | buyer (default buyer; ignored on repeat)

    Returns 201 on creation, 200 when the account already existed.
    """
    data = request.get_json(silent=True)
    account, created = account_service.register_account(data)

    token = credential_service.issue_token(account.email)
    response = jsonify({"account": account.to_dict(), "created": created, "token": token})
    response.status_code = 201 if created else 200
    return credential_service.set_token_cookie(response, token)


@auth_bp.post("/login")
def login_route():
    """
    Issue a credential for an email.

    Identity proofing happens upstream; this endpoint only binds the email
    to a signed token. Authorization still requires an account record.
    """
    data = request.get_json(silent=True) or {}
    email = data.get("email")
    if not isinstance(email, str) or not email.strip():
        raise ValidationError("email is required")

    token = credential_service.issue_token(email.strip())
    response = jsonify({"success": True, "token": token})
    return credential_service.set_token_cookie(response, token)


@auth_bp.post("/logout")
def logout_route():
    response = jsonify({"success": True})
    return credential_service.clear_token_cookie(response)
