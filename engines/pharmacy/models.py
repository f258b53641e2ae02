"""
MedRestock Pharmacy Engine — Profile Record
=============================================
Display details a pharmacy maintains about itself.

Profiles are read only when a restock request is submitted; the request
keeps its own snapshot, so later edits never change past requests.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class PharmacyProfile:
    pharmacy_id: str
    pharmacy_name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    phone: str = ""
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.pharmacy_id:
            raise ValueError("pharmacy_id must be non-empty.")

    @property
    def full_address(self) -> str:
        """Street, city and state joined with commas, skipping blanks."""
        parts = (self.address, self.city, self.state)
        return ", ".join(part for part in parts if part)

    def to_dict(self) -> dict:
        return {
            "pharmacy_id": self.pharmacy_id,
            "pharmacy_name": self.pharmacy_name,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "phone": self.phone,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> PharmacyProfile:
        updated_at = data.get("updated_at")
        return cls(
            pharmacy_id=data["pharmacy_id"],
            pharmacy_name=data.get("pharmacy_name") or "",
            address=data.get("address") or "",
            city=data.get("city") or "",
            state=data.get("state") or "",
            phone=data.get("phone") or "",
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
        )


@dataclass(frozen=True)
class PharmacySnapshot:
    """Profile fields frozen into a restock request. Never empty."""
    pharmacy_name: str
    pharmacy_address: str
    pharmacy_phone: str
