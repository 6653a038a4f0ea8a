"""Claimed reward model."""

from datetime import datetime

from aurora import db


class ClaimedReward(db.Model):
    """A redeemed catalog reward. Written once per (user, reward), never mutated."""

    __tablename__ = "claimed_rewards"
    __table_args__ = (
        db.UniqueConstraint("user_id", "reward_id", name="uq_claimed_rewards_user_reward"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    reward_id = db.Column(db.String(64), nullable=False)
    code = db.Column(db.String(128), nullable=False)
    claimed_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self) -> dict:
        """Convert claim to dictionary."""
        return {
            "id": self.id,
            "user": self.user_id,
            "rewardId": self.reward_id,
            "code": self.code,
            "claimedAt": self.claimed_at.isoformat() if self.claimed_at else None,
        }

    def __repr__(self) -> str:
        return f"<ClaimedReward user={self.user_id} reward={self.reward_id}>"
