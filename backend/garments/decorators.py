# Overview: Request decorators that resolve identity and enforce the guard.

from functools import wraps
from flask import request, g, current_app

from .errors import UnauthorizedError
from .permissions import Action, Audience, ACTION_AUDIENCE
from .services import account_service, credential_service, permission_service


def _extract_token() -> str | None:
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return request.cookies.get(current_app.config["TOKEN_COOKIE_NAME"]) or None


def load_identity(*, strict: bool = True) -> None:
    """
    Resolve the caller for this request.

    Sets:
    - g.current_email: email bound to a verified credential, else None
    - g.current_account: the directory record for that email, else None

    With strict=False a bad credential is treated as anonymous instead of
    raising UnauthorizedError (public routes should not fail on a stale cookie).
    """
    g.current_email = None
    g.current_account = None

    token = _extract_token()
    if not token:
        return

    try:
        email = credential_service.verify_token(token)
    except UnauthorizedError:
        if strict:
            raise
        return

    g.current_email = email
    g.current_account = account_service.get_account_by_email(email)


def require_action(action: Action):
    """
    Evaluate the authorization guard for ``action`` before the view runs.

    The account is re-read on every request, so role and status changes take
    effect immediately.
    """
    public = ACTION_AUDIENCE.get(action) is Audience.PUBLIC

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            load_identity(strict=not public)
            permission_service.require_action(
                g.current_account,
                action,
                authenticated=g.current_email is not None,
                identity=g.current_email,
                resource=request.path,
            )
            return f(*args, **kwargs)

        return decorated_function
    return decorator
