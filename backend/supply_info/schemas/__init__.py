"""Pydantic schemas for the supply endpoints"""

from .supply import (
    LastErrorResponse,
    StatusErrorResponse,
    SupplySnapshotResponse,
    TriggerRecordResponse,
)

__all__ = [
    "LastErrorResponse",
    "StatusErrorResponse",
    "SupplySnapshotResponse",
    "TriggerRecordResponse",
]
