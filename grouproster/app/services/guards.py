"""
Guards that turn a zero-row conditional write into a typed conflict.

Every guarded mutation is a single ``UPDATE ... WHERE <still valid>``; the
affected-row count is the only source of truth for whether the precondition
held at write time.
"""

from fastapi import status

from grouproster.app.core.errors import (
    INVALID_SLOT_ID,
    ROSTER_LOCKED_MODIFICATION,
    TOKEN_ALREADY_USED,
    ApiStatusError,
)


def assert_invite_token_claimed(claimed_count: int) -> None:
    if claimed_count == 0:
        raise ApiStatusError(status.HTTP_409_CONFLICT, TOKEN_ALREADY_USED)


def assert_member_update_applied(updated_count: int) -> None:
    if updated_count == 0:
        raise ApiStatusError(status.HTTP_409_CONFLICT, ROSTER_LOCKED_MODIFICATION)


def assert_booking_slot_exists(slot) -> None:
    if not slot:
        raise ApiStatusError(status.HTTP_404_NOT_FOUND, INVALID_SLOT_ID)
