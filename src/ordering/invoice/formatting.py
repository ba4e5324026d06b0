"""Indonesian-locale formatting for invoices: rupiah amounts and long dates."""

from datetime import UTC, date, datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal

# Western Indonesia Time; invoices show calendar dates as customers see them
WIB = timezone(timedelta(hours=7))

WEEKDAYS = ("Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu")
MONTHS = (
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
)


def format_rupiah(amount) -> str:
    """``1234567`` -> ``Rp 1.234.567,00``."""
    value = Decimal(str(amount or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, cents = f"{abs(value):.2f}".split(".")
    grouped = f"{int(whole):,}".replace(",", ".")
    return f"{sign}Rp {grouped},{cents}"


def format_long_date(value: date | datetime | None) -> str:
    """``date(2024, 1, 15)`` -> ``Senin, 15 Januari 2024``.

    Datetimes are shown on the WIB calendar; naive ones are read as UTC.
    """
    if value is None:
        return "-"
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        value = value.astimezone(WIB)
    return f"{WEEKDAYS[value.weekday()]}, {value.day} {MONTHS[value.month - 1]} {value.year}"


def display_payment_method(specific_method: str | None, method: str | None) -> str:
    """The instrument the gateway reported (``bank_transfer`` -> ``BANK TRANSFER``), else the initial method."""
    if specific_method:
        return specific_method.replace("_", " ").upper()
    return method or "-"
