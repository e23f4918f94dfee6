"""User profiles.

A user's id is their display name. New accounts start ``inactive`` and sit in
the awaiting-activation set until the user (or an admin) activates them.
Only admins can ban.
"""

from __future__ import annotations

import logging

from ..storage import get_store
from .exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationException
from .models import DEFAULT_BIO, User, UserStatus, now_ms
from .validation import require_text

logger = logging.getLogger(__name__)

# Statuses a user may set on their own profile
SELF_SERVICE_STATUSES = frozenset({UserStatus.ACTIVE, UserStatus.INACTIVE})


def create_user(name: str, bio: str | None = None) -> User:
    """Register a new user.

    Raises:
        MissingFieldError: ``name`` is empty.
        ConflictError: a user with that name already exists.
    """
    user_id = require_text(name, "name")
    store = get_store()
    with store.lock(f"user:{user_id}"):
        if store.user_exists(user_id):
            raise ConflictError("User already exists", existing_id=user_id)
        user = User(
            id=user_id,
            bio=bio.strip() if bio and bio.strip() else DEFAULT_BIO,
            status=UserStatus.INACTIVE,
            created_at=now_ms(),
        )
        store.put_user(user)
        store.mark_inactive(user_id, True)
    logger.info("Registered user %s", user_id)
    return user


def get_user(user_id: str) -> User:
    user = get_store().get_user(user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


def update_user(user_id: str, status: str | None = None, bio: str | None = None) -> User:
    """Update a user's own profile.

    Raises:
        NotFoundError: no such user.
        ValidationException: ``status`` is not ``active`` or ``inactive``.
        ForbiddenError: the user is banned.
    """
    store = get_store()
    with store.lock(f"user:{user_id}"):
        user = store.get_user(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        if user.status == UserStatus.BANNED:
            raise ForbiddenError(f"User {user_id} is banned", reason="banned")

        if status is not None:
            try:
                new_status = UserStatus(status)
            except ValueError:
                raise ValidationException("Invalid status", field="status", value=status) from None
            if new_status not in SELF_SERVICE_STATUSES:
                raise ValidationException("Invalid status", field="status", value=status)
            user.status = new_status
        if bio is not None:
            user.bio = bio.strip() or DEFAULT_BIO

        store.put_user(user)
        store.mark_inactive(user_id, user.status == UserStatus.INACTIVE)
    return user


def ensure_not_banned(*user_ids: str) -> None:
    """Raise ForbiddenError if any of the given users is banned.

    Users without a profile are allowed through; profiles are optional for
    claims, invitations and debates.
    """
    store = get_store()
    for user_id in user_ids:
        user = store.get_user(user_id)
        if user is not None and user.status == UserStatus.BANNED:
            raise ForbiddenError(f"User {user_id} is banned", reason="banned")
