"""Typed errors raised by ledger commands."""


class LedgerError(Exception):
    """Base class for every ledger rule violation."""


class EmptyNameError(LedgerError):
    """Raised when a name is blank after trimming."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"{kind.capitalize()} name cannot be empty.")


class DuplicateIdentityError(LedgerError):
    """Raised when a name (and optional context) collides with another entity.

    Attributes:
        kind: Entity kind (category, platform, asset, snapshot, cash flow).
        name: Raw name that collided.
        context: Raw context (platform for assets), empty when not relevant.
    """

    def __init__(self, kind: str, name: str, context: str = "") -> None:
        self.kind = kind
        self.name = name
        self.context = context
        if kind == "asset":
            if context:
                message = (
                    f"An asset named '{name}' on platform '{context}' "
                    "already exists."
                )
            else:
                message = (
                    f"An asset named '{name}' already exists without a platform."
                )
        else:
            message = f"A {kind} named '{name}' already exists."
        super().__init__(message)


class CannotDeleteReferencedError(LedgerError):
    """Raised when an entity still has dependents that block deletion."""

    def __init__(self, kind: str, count: int, dependent: str = "asset") -> None:
        self.kind = kind
        self.count = count
        self.dependent = dependent
        super().__init__(
            f"This {kind} cannot be deleted because it has {count} "
            f"{dependent}(s) assigned. Reassign the {dependent}s first."
        )


class WouldCauseNegativeQuantityError(LedgerError):
    """Raised when deleting a transaction would leave a negative quantity."""

    def __init__(self, transaction_id: str, resulting_quantity) -> None:
        self.transaction_id = transaction_id
        self.resulting_quantity = resulting_quantity
        super().__init__(
            "Deleting this transaction would cause the asset quantity to "
            f"become negative ({resulting_quantity}). Delete or edit other "
            "transactions first."
        )


class InvalidTargetAllocationError(LedgerError):
    """Raised when a target percentage is outside 0-100."""

    def __init__(self, value) -> None:
        self.value = value
        super().__init__(
            f"Target allocation must be between 0% and 100% (got {value})."
        )


class AssetLockedError(LedgerError):
    """Raised when editing a locked asset's type or currency."""

    def __init__(self, asset_name: str, field_name: str) -> None:
        self.asset_name = asset_name
        self.field_name = field_name
        super().__init__(
            f"Cannot change {field_name} of '{asset_name}': the asset has "
            "recorded transactions or prices."
        )


class EntityNotFoundError(LedgerError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, kind: str, entity_id: str) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"Unknown {kind}: {entity_id}")


class PersistenceError(LedgerError):
    """Raised when the repository fails to commit a unit of work."""


__all__ = [
    "LedgerError",
    "EmptyNameError",
    "DuplicateIdentityError",
    "CannotDeleteReferencedError",
    "WouldCauseNegativeQuantityError",
    "InvalidTargetAllocationError",
    "AssetLockedError",
    "EntityNotFoundError",
    "PersistenceError",
]
