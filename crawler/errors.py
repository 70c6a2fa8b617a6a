class TrackerError(Exception):
    """Base class for errors raised by the crawler and cache layers."""


class AmbiguousIdentityError(TrackerError):
    """
    Raised when a write would make find_by_either_id ambiguous: one of the
    record's ids is already used by a different row, in either id column.
    """

    def __init__(self, account_id: str, existing_account_id: str) -> None:
        super().__init__(
            f"ids of player {account_id} collide with existing player {existing_account_id}"
        )
        self.account_id = account_id
        self.existing_account_id = existing_account_id


class UnauthorizedPushError(TrackerError):
    """Raised when a push-sync request carries a missing or wrong shared secret."""


class InvalidPayloadError(TrackerError):
    """Raised when a push-sync batch fails validation. Nothing is applied."""
