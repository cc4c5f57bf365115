"""Domain exceptions raised by the ledger services."""


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    pass


class ValidationError(LedgerError):
    """Raised when an expense or balance map is rejected before any write."""

    pass


class NotFoundError(LedgerError):
    """Raised for an unknown group, member or edge."""

    pass


class StateError(LedgerError):
    """Raised when an operation is not valid in the group's current state."""

    pass


class AlreadyResolvedError(StateError):
    """Raised when resolving an edge that is no longer pending."""

    def __init__(self, debtor_id: str, creditor_id: str, message: str | None = None):
        self.debtor_id = debtor_id
        self.creditor_id = creditor_id
        super().__init__(
            message or f"Edge {debtor_id} -> {creditor_id} is already resolved"
        )


class ConcurrencyConflict(LedgerError):
    """Raised when a group was modified by someone else between read and commit."""

    def __init__(self, group_id: str, expected_version: int, message: str | None = None):
        self.group_id = group_id
        self.expected_version = expected_version
        super().__init__(
            message
            or f"Version conflict on group {group_id}: expected version {expected_version}"
        )
