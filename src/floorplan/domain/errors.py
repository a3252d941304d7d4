"""Exceptions raised by domain services."""

from __future__ import annotations


class EditRejected(Exception):
    """Raised when a requested plan edit is refused.

    Rejections are normal outcomes of user interaction (deleting the main
    room, editing a wall whose next point is attached, ...). Domain
    services raise this before touching any state; the plan editor turns it
    into an unapplied EditResult.

    Attributes:
        message: Human-readable reason shown to the user.
        reason: Short machine-readable category.
    """

    def __init__(self, message: str, reason: str = "rejected") -> None:
        self.message = message
        self.reason = reason
        super().__init__(message)

    def __str__(self) -> str:
        return self.message
