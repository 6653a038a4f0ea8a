"""Leaderboard API endpoints."""

from flask_jwt_extended import jwt_required

from aurora.api import api_bp
from aurora.services.leaderboard_service import LeaderboardService
from aurora.utils import success_response


@api_bp.route("/leaderboard", methods=["GET"])
@jwt_required()
def get_leaderboard():
    return success_response({"leaderboard": LeaderboardService().top_users()})
