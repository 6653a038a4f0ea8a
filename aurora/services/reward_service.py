"""Reward catalog status and claim ledger."""

import uuid

import structlog
from flask import current_app
from sqlalchemy.exc import IntegrityError

from aurora import db
from aurora.errors import ForbiddenError, NotFoundError
from aurora.models.claimed_reward import ClaimedReward
from aurora.models.reward import REWARD_CATALOG, Reward, get_reward
from aurora.models.user import User
from aurora.services.level_calculator import level_of

logger = structlog.get_logger()


class RewardStatus:
    LOCKED = "locked"
    UNLOCKED = "unlocked"
    CLAIMED = "claimed"


class RewardService:
    """Gates catalog rewards on level and issues at most one code per user."""

    def _get_user(self, user_id: int) -> User:
        user = db.session.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_rewards_with_status(self, user_id: int) -> dict:
        """Return every catalog reward with its status for the user."""
        user = self._get_user(user_id)
        user_level = level_of(user.xp or 0)

        claimed_ids = {
            reward_id
            for (reward_id,) in db.session.query(ClaimedReward.reward_id).filter_by(
                user_id=user_id
            )
        }

        rewards = []
        for reward in REWARD_CATALOG:
            if reward.id in claimed_ids:
                status = RewardStatus.CLAIMED
            elif user_level >= reward.level:
                status = RewardStatus.UNLOCKED
            else:
                status = RewardStatus.LOCKED
            rewards.append({**reward.to_dict(), "status": status})

        return {"rewards": rewards, "userLevel": user_level}

    def claim_reward(self, user_id: int, reward_id: str) -> ClaimedReward:
        """Claim a reward, returning the existing claim if there is one.

        Uniqueness of (user, reward) is enforced by the table constraint:
        the insert is attempted directly and a constraint violation means a
        concurrent or earlier claim won, so that record is returned instead.
        """
        reward = get_reward(reward_id)
        if reward is None:
            raise NotFoundError("Reward not found")

        user = self._get_user(user_id)
        user_level = level_of(user.xp or 0)
        if user_level < reward.level:
            raise ForbiddenError(
                "You have not reached the required level for this reward",
                details={"requiredLevel": reward.level, "userLevel": user_level},
            )

        claim = ClaimedReward(
            user_id=user_id, reward_id=reward.id, code=self.generate_code(reward)
        )
        db.session.add(claim)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            existing = ClaimedReward.query.filter_by(
                user_id=user_id, reward_id=reward.id
            ).first()
            if existing is None:
                raise
            logger.info("reward_already_claimed", user_id=user_id, reward_id=reward.id)
            return existing

        logger.info("reward_claimed", user_id=user_id, reward_id=reward.id)
        return claim

    @staticmethod
    def generate_code(reward: Reward) -> str:
        """Human-readable claim code: ``PREFIX-REWARD_ID-XXXXXXXX``."""
        prefix = current_app.config.get("REWARD_CODE_PREFIX", "AURORA")
        suffix = uuid.uuid4().hex[:8].upper()
        return f"{prefix}-{reward.id.upper()}-{suffix}"
