"""Administrative operations: activation queue, bans, purges and full wipes."""

from __future__ import annotations

import logging

from ..storage import get_store
from .exceptions import NotFoundError
from .models import User, UserStatus

logger = logging.getLogger(__name__)


def list_inactive_users() -> list[str]:
    """Users who registered but have not been activated yet."""
    return get_store().inactive_users()


def ban_user(user_id: str) -> User:
    """Set ``user_id``'s status to banned.

    Banned users keep their data but can no longer claim, invite, post or
    change their own profile.
    """
    store = get_store()
    with store.lock(f"user:{user_id}"):
        user = store.get_user(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        user.status = UserStatus.BANNED
        store.put_user(user)
        store.mark_inactive(user_id, False)
    logger.warning("User %s banned", user_id, extra={"user_id": user_id})
    return user


def purge_user(user_id: str) -> None:
    """Delete a user and cascade to their claims, memberships, stats and invitations.

    Idempotent: purging an unknown user is a no-op.
    """
    store = get_store()
    with store.lock(f"user:{user_id}"):
        store.purge_user(user_id)
    logger.warning("User %s purged", user_id, extra={"user_id": user_id})


def wipe_all() -> int:
    """Delete every arena record. Returns the number of records removed."""
    removed = get_store().wipe()
    logger.warning("Arena data wiped (%d records)", removed)
    return removed
