"""Authentication API endpoints."""

from flask_jwt_extended import create_access_token, jwt_required

from aurora.api import api_bp
from aurora.services.user_service import UserService
from aurora.utils import get_current_user, require_json, success_response


def _session_payload(user):
    return {
        "user": user.to_dict(),
        "token": create_access_token(identity=str(user.id)),
    }


@api_bp.route("/auth/register", methods=["POST"])
def register():
    """
    Create an account and sign in.

    Request body:
    {
        "name": "Ada",
        "email": "ada@example.com",
        "password": "at least 6 characters"
    }
    """
    user = UserService().register(require_json())
    return success_response(_session_payload(user), status_code=201)


@api_bp.route("/auth/login", methods=["POST"])
def login():
    """Exchange email and password for a JWT."""
    user = UserService().authenticate(require_json())
    return success_response(_session_payload(user))


@api_bp.route("/auth/me", methods=["GET"])
@jwt_required()
def get_current_user_info():
    """Get current authenticated user."""
    return success_response({"user": get_current_user().to_dict()})
