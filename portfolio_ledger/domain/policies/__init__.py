"""Domain policies package."""

from .allocation import target_allocation_warning, validate_target_percentage
from .transaction_deletion import can_delete_transaction, quantity_after_deletion

__all__ = [
    "can_delete_transaction",
    "quantity_after_deletion",
    "target_allocation_warning",
    "validate_target_percentage",
]
