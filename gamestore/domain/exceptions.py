class StorefrontError(Exception):
    """Base class for business and persistence errors raised by the store."""


class InvalidArgument(StorefrontError):
    """Raised when a request carries a malformed or disallowed value."""


class NotFound(StorefrontError):
    """Raised when an account, catalogue item or transaction record does not exist."""

    def __init__(self, entity, identifier):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity.capitalize()} {identifier} not found")


class InsufficientFunds(StorefrontError):
    """Raised when an account balance does not cover the cost of a transaction."""

    def __init__(self, account_id, required, available):
        self.account_id = account_id
        self.required = required
        self.available = available
        super().__init__(
            f"Account {account_id}: required {required}, available {available}"
        )


class PersistenceFailure(StorefrontError):
    """Raised when the backing store is unavailable or rejects a write."""


class InconsistentState(StorefrontError):
    """
    Raised when a debit may have been applied without its transaction record.

    Never retried. The account needs manual reconciliation.
    """

    def __init__(self, account_id, item_id, amount):
        self.account_id = account_id
        self.item_id = item_id
        self.amount = amount
        super().__init__(
            f"Account {account_id}: debit of {amount} for item {item_id} "
            f"could not be confirmed as rolled back"
        )
