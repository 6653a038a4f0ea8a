"""XP ledger: applies XP deltas to a user's running total."""

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from aurora import db
from aurora.errors import DependencyFailure, NotFoundError
from aurora.models.user import User

logger = structlog.get_logger()


class XPLedger:
    """Grants XP with an atomic ``xp = xp + n`` update.

    The increment happens in SQL, never as read-modify-write in Python, so
    concurrent grants for the same user cannot lose updates.
    """

    def grant_xp(self, user_id: int, amount: int, reason: str = "") -> int:
        """Add ``amount`` XP to the user and return the new total.

        Commits its own unit of work. Raises :class:`NotFoundError` for an
        unknown user and :class:`DependencyFailure` if storage fails.
        """
        if amount < 0:
            raise ValueError("XP amount must be non-negative")

        try:
            if amount:
                result = db.session.execute(
                    update(User)
                    .where(User.id == user_id)
                    .values(xp=User.xp + amount)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    db.session.rollback()
                    raise NotFoundError("User not found")
                db.session.commit()

            total = db.session.scalar(select(User.xp).where(User.id == user_id))
        except SQLAlchemyError as e:
            db.session.rollback()
            raise DependencyFailure("Failed to apply XP grant") from e

        if total is None:
            raise NotFoundError("User not found")

        if amount:
            logger.info(
                "xp_granted",
                user_id=user_id,
                amount=amount,
                total_xp=total,
                reason=reason,
            )
        return total

    def grant_xp_best_effort(self, user_id: int, amount: int, reason: str = "") -> int:
        """Grant XP after a primary record was already persisted.

        Failures are logged and swallowed; the primary record is kept.
        Returns the XP actually granted (``amount`` or 0).
        """
        if amount <= 0:
            return 0
        try:
            self.grant_xp(user_id, amount, reason=reason)
        except (DependencyFailure, NotFoundError) as e:
            logger.error(
                "xp_grant_failed",
                user_id=user_id,
                amount=amount,
                reason=reason,
                error=str(e),
            )
            return 0
        return amount
