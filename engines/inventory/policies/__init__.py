"""
MedRestock Inventory Engine — Policies
========================================
Pure stock rules and field validation for medicine records.

Nothing here touches the store or the clock: every function takes its
inputs explicitly.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Tuple

from core.errors import ValidationError
from engines.inventory.models import Medicine, StockStatus

DEFAULT_EXPIRY_WARNING_DAYS = 30

EDITABLE_FIELDS = (
    "name",
    "quantity",
    "threshold",
    "expiry_date",
    "batch_number",
    "manufacturer",
    "unit_price",
)
REQUIRED_FIELDS = ("name", "quantity", "threshold", "expiry_date")
IMMUTABLE_FIELDS = ("id", "medicine_id", "created_by", "created_at", "updated_at")


# ══════════════════════════════════════════════════════════════
# STOCK RULES
# ══════════════════════════════════════════════════════════════

def stock_status_for(quantity: int, threshold: int) -> StockStatus:
    """Zero is out of stock; anything up to and including threshold is low."""
    if quantity == 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= threshold:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def compute_stock_status(medicine: Medicine) -> StockStatus:
    return stock_status_for(medicine.quantity, medicine.threshold)


def is_low_stock(medicine: Medicine) -> bool:
    return compute_stock_status(medicine) is not StockStatus.IN_STOCK


def is_expiring_soon(
    medicine: Medicine,
    as_of: date,
    window_days: int = DEFAULT_EXPIRY_WARNING_DAYS,
) -> bool:
    """True iff expiry_date <= as_of + window_days (inclusive)."""
    if isinstance(as_of, datetime):
        as_of = as_of.date()
    return medicine.expiry_date <= as_of + timedelta(days=window_days)


# ══════════════════════════════════════════════════════════════
# FIELD PARSING
# ══════════════════════════════════════════════════════════════

def _parse_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return int(value.strip())
    raise ValueError("must be an integer")


def parse_expiry_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip())
    raise ValueError("must be an ISO date")


def parse_unit_price(value: Any) -> Decimal:
    """Unparsable prices become 0. Negative prices are rejected by the caller."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not price.is_finite():
        return Decimal("0")
    return price


def _optional_text(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError("must be a string")
    return value.strip()


# ══════════════════════════════════════════════════════════════
# VALIDATION
# ══════════════════════════════════════════════════════════════

def validate_medicine_fields(
    fields: Mapping[str, Any],
    *,
    partial: bool = False,
) -> Dict[str, Any]:
    """
    Normalize medicine input and collect every violation.

    partial=False (add):    name, quantity, threshold, expiry_date required.
    partial=True (update):  only the supplied fields are checked.

    Returns the normalized values keyed by field name.

    Raises:
        ValidationError listing all violated fields.
    """
    errors: Dict[str, str] = {}
    cleaned: Dict[str, Any] = {}

    for key in fields:
        if key in IMMUTABLE_FIELDS:
            errors[key] = "cannot be changed"
        elif key not in EDITABLE_FIELDS:
            errors[key] = "unknown field"

    if not partial:
        for key in REQUIRED_FIELDS:
            if fields.get(key) is None:
                errors[key] = "is required"

    if "name" in fields and "name" not in errors:
        name = fields["name"]
        if not isinstance(name, str) or not name.strip():
            errors["name"] = "must be a non-empty string"
        else:
            cleaned["name"] = name.strip()

    if "quantity" in fields and "quantity" not in errors:
        try:
            quantity = _parse_int(fields["quantity"])
        except ValueError:
            errors["quantity"] = "must be an integer"
        else:
            if quantity < 0:
                errors["quantity"] = "must be >= 0"
            else:
                cleaned["quantity"] = quantity

    if "threshold" in fields and "threshold" not in errors:
        try:
            threshold = _parse_int(fields["threshold"])
        except ValueError:
            errors["threshold"] = "must be an integer"
        else:
            if threshold < 1:
                errors["threshold"] = "must be >= 1"
            else:
                cleaned["threshold"] = threshold

    if "expiry_date" in fields and "expiry_date" not in errors:
        try:
            cleaned["expiry_date"] = parse_expiry_date(fields["expiry_date"])
        except ValueError:
            errors["expiry_date"] = "must be a valid ISO date (YYYY-MM-DD)"

    for key in ("batch_number", "manufacturer"):
        if key in fields and key not in errors:
            try:
                cleaned[key] = _optional_text(fields[key])
            except ValueError as exc:
                errors[key] = str(exc)

    if "unit_price" in fields and "unit_price" not in errors:
        price = parse_unit_price(fields["unit_price"])
        if price < 0:
            errors["unit_price"] = "must be non-negative"
        else:
            cleaned["unit_price"] = price

    if errors:
        raise ValidationError(errors)
    return cleaned


def split_by_status(
    medicines: Tuple[Medicine, ...],
) -> Dict[StockStatus, Tuple[Medicine, ...]]:
    """Group medicines by stock status, each group in input order."""
    groups: Dict[StockStatus, list] = {status: [] for status in StockStatus}
    for medicine in medicines:
        groups[compute_stock_status(medicine)].append(medicine)
    return {status: tuple(items) for status, items in groups.items()}
