"""Authentication utilities."""

from flask_jwt_extended import get_jwt_identity

from aurora import db
from aurora.errors import UnauthorizedError
from aurora.models.user import User


def current_user_id() -> int:
    """Id of the authenticated caller. Use under ``@jwt_required()``."""
    return int(get_jwt_identity())


def get_current_user() -> User:
    """Load the authenticated caller, rejecting tokens for deleted accounts."""
    user = db.session.get(User, current_user_id())
    if not user:
        raise UnauthorizedError("User not found")
    return user
