"""
MedRestock Inventory Engine — Medicine Record
===============================================
The per-pharmacy medicine record and its derived stock status.

RULES:
- medicine_id, created_by and created_at never change after creation
- threshold >= 1 and quantity >= 0 (validated before construction)
- updated_at is bumped by the ledger on every mutation
- to_dict() is the plain transfer shape handed to the UI and the store
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class StockStatus(Enum):
    OUT_OF_STOCK = "OutOfStock"
    LOW_STOCK = "LowStock"
    IN_STOCK = "InStock"


@dataclass(frozen=True)
class Medicine:
    """
    One medicine line in a pharmacy's ledger.

    Fields:
        medicine_id:  Opaque unique id assigned at creation
        name:         Display name (non-empty)
        quantity:     Current stock (>= 0)
        threshold:    Reorder trigger (>= 1)
        expiry_date:  Calendar expiry date (past dates are allowed)
        batch_number: Optional batch reference ("" when absent)
        manufacturer: Optional manufacturer ("" when absent)
        unit_price:   Non-negative price per unit
        created_by:   Owning pharmacy id
        created_at:   Creation time (UTC)
        updated_at:   Last mutation time (UTC)
    """
    medicine_id: str
    name: str
    quantity: int
    threshold: int
    expiry_date: date
    created_by: str
    created_at: datetime
    updated_at: datetime
    batch_number: str = ""
    manufacturer: str = ""
    unit_price: Decimal = Decimal("0")

    def __post_init__(self):
        if not self.medicine_id:
            raise ValueError("medicine_id must be non-empty.")
        if not self.name:
            raise ValueError("name must be non-empty.")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 0:
            raise ValueError("quantity must be a non-negative integer.")
        if isinstance(self.threshold, bool) or not isinstance(self.threshold, int) or self.threshold < 1:
            raise ValueError("threshold must be an integer >= 1.")
        if not self.created_by:
            raise ValueError("created_by must be non-empty.")
        if self.unit_price < 0:
            raise ValueError("unit_price must be non-negative.")

    def to_dict(self) -> dict:
        return {
            "id": self.medicine_id,
            "name": self.name,
            "quantity": self.quantity,
            "threshold": self.threshold,
            "expiry_date": self.expiry_date.isoformat(),
            "batch_number": self.batch_number,
            "manufacturer": self.manufacturer,
            "unit_price": str(self.unit_price),
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Medicine:
        return cls(
            medicine_id=data["id"],
            name=data["name"],
            quantity=int(data["quantity"]),
            threshold=int(data["threshold"]),
            expiry_date=date.fromisoformat(data["expiry_date"]),
            batch_number=data.get("batch_number") or "",
            manufacturer=data.get("manufacturer") or "",
            unit_price=Decimal(data.get("unit_price") or "0"),
            created_by=data["created_by"],
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )
