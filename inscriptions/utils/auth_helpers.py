# inscriptions/utils/auth_helpers.py
from flask import current_app, jsonify
from flask_jwt_extended import get_jwt

ADMIN_ROLE = "admin"


def get_credential_verifier():
    """Credential verifier injected in create_app"""
    return current_app.extensions["credential_verifier"]


def require_admin(func):
    """Require the admin role claim (use after jwt_required)"""
    from functools import wraps

    @wraps(func)
    def wrapper(*args, **kwargs):
        if get_jwt().get("role") != ADMIN_ROLE:
            return jsonify(
                {"message": "Accès refusé. Rôle administrateur requis."}
            ), 403

        return func(*args, **kwargs)

    return wrapper
