"""Checkout payload validation, run before anything is written.

All problems are collected and raised together as one
``ValidationError`` keyed by field, so the client can highlight each
offending input.
"""

import re
from datetime import date, datetime
from numbers import Number

from protean.exceptions import ValidationError

from ordering.order.order import earliest_delivery_date

PHONE_PATTERN = re.compile(r"[0-9]{10,15}")

REQUIRED_FIELDS = (
    "items",
    "total_amount",
    "total_weight",
    "delivery_date",
    "address",
    "recipient_name",
    "recipient_phone",
    "shipping_cost",
    "amount",
)
REQUIRED_ADDRESS_FIELDS = ("street", "province", "regency", "district", "zipcode")
NON_NEGATIVE_FIELDS = ("total_amount", "total_weight", "shipping_cost", "amount")
POSITIVE_ITEM_FIELDS = ("quantity", "unit_price", "line_total")


def _missing(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str | list | dict) and not value:
        return True
    return False


def parse_delivery_date(value) -> date | None:
    """Accept a date, a datetime or an ISO string; time of day is discarded."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip()).date()
        except ValueError:
            return None
    return None


def _is_number(value) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def validate_checkout(payload: dict, today: date, lead_days: int = 2) -> dict:
    """Validate a checkout payload and return it with ``delivery_date`` parsed to a date."""
    errors: dict[str, list[str]] = {}

    for field in REQUIRED_FIELDS:
        if _missing(payload.get(field)):
            errors.setdefault(field, []).append("is required")

    for field in NON_NEGATIVE_FIELDS:
        value = payload.get(field)
        if field not in errors and (not _is_number(value) or value < 0):
            errors.setdefault(field, []).append("must be a number greater than or equal to 0")

    address = payload.get("address")
    if "address" not in errors:
        if not isinstance(address, dict):
            errors["address"] = ["must be an object"]
        else:
            for part in REQUIRED_ADDRESS_FIELDS:
                if _missing(address.get(part)):
                    errors.setdefault(f"address.{part}", []).append("is required")

    phone = payload.get("recipient_phone")
    if "recipient_phone" not in errors and not PHONE_PATTERN.fullmatch(str(phone)):
        errors["recipient_phone"] = ["must be 10 to 15 digits"]

    delivery_date = None
    if "delivery_date" not in errors:
        delivery_date = parse_delivery_date(payload.get("delivery_date"))
        if delivery_date is None:
            errors["delivery_date"] = ["is not a valid date"]
        elif delivery_date < earliest_delivery_date(today, lead_days):
            errors["delivery_date"] = [f"must be at least {lead_days} days from today"]

    if "items" not in errors:
        item_errors = _validate_items(payload.get("items"))
        if item_errors:
            errors["items"] = item_errors

    if errors:
        raise ValidationError(errors)

    return {**payload, "delivery_date": delivery_date}


def _validate_items(items) -> list[str]:
    if not isinstance(items, list):
        return ["must be a list"]

    problems = []
    for position, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            problems.append(f"item {position}: must be an object")
            continue
        if _missing(item.get("product_id")):
            problems.append(f"item {position}: product_id is required")
        if _missing(item.get("name")):
            problems.append(f"item {position}: name is required")
        for field in POSITIVE_ITEM_FIELDS:
            value = item.get(field)
            if not _is_number(value) or value <= 0:
                problems.append(f"item {position}: {field} must be greater than 0")
    return problems
