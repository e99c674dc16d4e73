from enum import Enum


class RequestStatus(str, Enum):
    """Outcome of the latest request a panel made."""

    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
