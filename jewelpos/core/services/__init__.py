"""
Core business logic services.

Layer-pure services that depend only on:
- jewelpos/core/entities/*
- jewelpos/core/exceptions.py

NO storage or network access. Orchestration lives in application use cases.
"""

from jewelpos.core.services import memo_lifecycle, notification_messages
from jewelpos.core.services.inventory_guard import aggregate_quantities, reserve
from jewelpos.core.services.pricing_calculator import (
    calculate_pricing,
    validate_percentage,
)
from jewelpos.core.services.transaction_builder import ResolvedLine, TransactionBuilder

__all__ = [
    # Pricing Calculator
    "calculate_pricing",
    "validate_percentage",
    # Inventory Guard
    "reserve",
    "aggregate_quantities",
    # Transaction Builder
    "TransactionBuilder",
    "ResolvedLine",
    # Memo Lifecycle
    "memo_lifecycle",
    # Notification messages
    "notification_messages",
]
