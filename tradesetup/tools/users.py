"""User quota tools.

Free users get three analyses per day; pro and admin users effectively
unlimited. Counters reset when the UTC calendar day changes.
"""

import random
import string
from datetime import datetime, timezone
from typing import Optional

from tradesetup.db.store import DataStore
from tradesetup.errors import UserNotFoundError
from tradesetup.models import DAILY_LIMITS, Plan, UserStats

_ID_ALPHABET = string.digits + string.ascii_lowercase


def utcnow(now: Optional[datetime] = None) -> datetime:
    return now or datetime.now(timezone.utc)


def generate_id(prefix: str, now: Optional[datetime] = None) -> str:
    """Build an ID like ``<prefix>_<epoch ms>_<9 base36 chars>``."""
    millis = int(utcnow(now).timestamp() * 1000)
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{prefix}_{millis}_{suffix}"


def _is_new_day(last_reset: datetime, now: datetime) -> bool:
    return last_reset.astimezone(timezone.utc).date() != now.astimezone(timezone.utc).date()


def initialize_user(
    store: DataStore, user_id: str, email: str = "", now: Optional[datetime] = None
) -> UserStats:
    """Create a free-plan user, or return the existing record."""
    existing = store.get_user(user_id)
    if existing is not None:
        return existing

    now = utcnow(now)
    user = UserStats(
        id=generate_id("user", now),
        user_id=user_id,
        email=email,
        plan=Plan.FREE,
        daily_limit=DAILY_LIMITS[Plan.FREE],
        created_at=now,
        last_quota_reset=now,
    )
    store.save_user(user)
    return user


def get_user_stats(
    store: DataStore, user_id: str, now: Optional[datetime] = None
) -> Optional[UserStats]:
    """Get a user's quota record, applying the daily reset if due.

    Returns:
        The user, or None if not found.
    """
    user = store.get_user(user_id)
    if user is None:
        return None

    now = utcnow(now)
    if _is_new_day(user.last_quota_reset, now):
        user = user.model_copy(update={"analyses_used_today": 0, "last_quota_reset": now})
        store.save_user(user)

    return user


def _require_user(store: DataStore, user_id: str, now: Optional[datetime]) -> UserStats:
    user = get_user_stats(store, user_id, now)
    if user is None:
        raise UserNotFoundError(f"User not found: {user_id}")
    return user


def consume_analysis_quota(
    store: DataStore, user_id: str, now: Optional[datetime] = None
) -> bool:
    """Use one analysis from today's quota.

    Returns:
        True if the quota allowed it, False if the daily limit is reached.

    Raises:
        UserNotFoundError: If the user does not exist.
    """
    now = utcnow(now)
    user = _require_user(store, user_id, now)

    if user.analyses_used_today >= user.daily_limit:
        return False

    store.save_user(
        user.model_copy(
            update={
                "analyses_used_today": user.analyses_used_today + 1,
                "total_analyses": user.total_analyses + 1,
                "last_analysis_at": now,
            }
        )
    )
    return True


def update_user_plan(
    store: DataStore, user_id: str, plan: Plan, now: Optional[datetime] = None
) -> UserStats:
    """Switch a user's plan and its daily limit."""
    user = _require_user(store, user_id, now)
    updated = user.model_copy(
        update={
            "plan": plan,
            "daily_limit": DAILY_LIMITS[plan],
            "is_admin": plan == Plan.ADMIN,
        }
    )
    store.save_user(updated)
    return updated


def reset_user_quota(
    store: DataStore, user_id: str, now: Optional[datetime] = None
) -> UserStats:
    """Reset today's usage counter."""
    now = utcnow(now)
    user = _require_user(store, user_id, now)
    updated = user.model_copy(update={"analyses_used_today": 0, "last_quota_reset": now})
    store.save_user(updated)
    return updated


def get_all_users(store: DataStore, limit: int = 1000) -> list[UserStats]:
    return store.get_users(limit)
