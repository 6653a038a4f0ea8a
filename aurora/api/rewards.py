"""Rewards API endpoints."""

from flask_jwt_extended import jwt_required

from aurora.api import api_bp
from aurora.services.reward_service import RewardService
from aurora.utils import current_user_id, success_response


@api_bp.route("/rewards", methods=["GET"])
@jwt_required()
def get_rewards():
    """All catalog rewards with ``locked``/``unlocked``/``claimed`` status."""
    return success_response(RewardService().list_rewards_with_status(current_user_id()))


@api_bp.route("/rewards/claim/<reward_id>", methods=["POST"])
@jwt_required()
def claim_reward(reward_id: str):
    """Claim an unlocked reward. Claiming twice returns the same code."""
    claim = RewardService().claim_reward(current_user_id(), reward_id)
    return success_response({"claim": claim.to_dict()})
