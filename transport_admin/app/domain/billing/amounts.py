"""
Amount derivation shared by every write path.

Trips and payments both store a denormalized total; it is always derived
here so create and update cannot disagree.
"""

from datetime import datetime, timedelta
from typing import Optional


def compute_total_amount(base_amount: Optional[float], service_charge: Optional[float]) -> float:
    """total = base + service charge, treating missing parts as zero."""
    return float(base_amount or 0) + float(service_charge or 0)


def compute_due_date(created_at: datetime, due_days: int) -> datetime:
    return created_at + timedelta(days=due_days)
