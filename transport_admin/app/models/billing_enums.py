"""
Billing enumerations.
"""

import enum


class PaymentStatus(str, enum.Enum):
    """Payment status enumeration."""
    PENDING = "pending"  # Recorded, money not received yet
    PROCESSING = "processing"
    COMPLETED = "completed"  # Money received, payment_date stamped
    FAILED = "failed"
    CANCELLED = "cancelled"
