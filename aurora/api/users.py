"""User profile and subjects API endpoints."""

from flask_jwt_extended import jwt_required

from aurora.api import api_bp
from aurora.services.user_service import UserService
from aurora.utils import (
    current_user_id,
    get_current_user,
    require_json,
    success_response,
)


@api_bp.route("/users/me", methods=["GET"])
@jwt_required()
def get_profile():
    return success_response({"user": get_current_user().to_dict()})


@api_bp.route("/users/me", methods=["PUT"])
@jwt_required()
def update_profile():
    """
    Update profile settings.

    Request body (all optional):
    {
        "name": "Ada",
        "password": "new password",
        "theme": "light" | "dark" | "system"
    }
    """
    user = UserService().update_profile(current_user_id(), require_json())
    return success_response({"user": user.to_dict()})


@api_bp.route("/users/me/subjects", methods=["GET"])
@jwt_required()
def get_subjects():
    return success_response(
        {"subjects": UserService().list_subjects(current_user_id())}
    )


@api_bp.route("/users/me/subjects", methods=["POST"])
@jwt_required()
def add_subject():
    subjects = UserService().add_subject(current_user_id(), require_json())
    return success_response({"subjects": subjects}, status_code=201)


@api_bp.route("/users/me/subjects/<path:subject>", methods=["DELETE"])
@jwt_required()
def delete_subject(subject: str):
    """Remove a subject. Subjects still used by tasks cannot be removed."""
    subjects = UserService().remove_subject(current_user_id(), subject)
    return success_response({"subjects": subjects})
