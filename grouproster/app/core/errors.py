"""Status-carrying business errors and their stable reason strings."""

from fastapi import HTTPException, status

INVALID_TOKEN = "Invalid token"
INVALID_TOKEN_PURPOSE = "Invalid token purpose"
NOT_A_LEADER_TOKEN = "Forbidden: Not a leader token"
TOKEN_EXPIRED = "Token expired"
TOKEN_ALREADY_USED = "Token already used"
GROUP_ROSTER_LOCKED = "Group roster is locked"
ROSTER_LOCKED = "Roster is locked"
ROSTER_LOCKED_MODIFICATION = "Roster is locked. Modifications are not allowed."
HEADCOUNT_EXCEEDED = "Group headcount exceeded"
INVALID_EDIT_TOKEN = "Invalid edit token"
INVALID_SLOT_ID = "Invalid slotId"
BOOKING_NOT_FOUND = "Booking not found"
INVALID_SCHEDULE = "Invalid schedule format"
RETRY_EXHAUSTED = "Temporary concurrency issue. Please retry."
INTERNAL_ERROR = "Internal Server Error"


class ApiStatusError(HTTPException):
    """A business-rule failure that must surface with a specific status code."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

    def __repr__(self) -> str:
        return f"ApiStatusError({self.status_code}, {self.detail!r})"


def internal_error() -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_ERROR)
