from datetime import UTC, date, datetime

from ordering.invoice.formatting import display_payment_method, format_long_date, format_rupiah


class TestFormatRupiah:
    def test_groups_thousands_with_dots(self):
        assert format_rupiah(1234567) == "Rp 1.234.567,00"

    def test_small_amount(self):
        assert format_rupiah(500) == "Rp 500,00"

    def test_cents(self):
        assert format_rupiah(15000.5) == "Rp 15.000,50"

    def test_none_is_zero(self):
        assert format_rupiah(None) == "Rp 0,00"


class TestFormatLongDate:
    def test_date(self):
        assert format_long_date(date(2024, 1, 15)) == "Senin, 15 Januari 2024"

    def test_datetime(self):
        assert format_long_date(datetime(2025, 8, 17, 10, 0, tzinfo=UTC)) == "Minggu, 17 Agustus 2025"

    def test_datetime_uses_wib_calendar(self):
        # 20:00 UTC is already 03:00 the next morning in Jakarta
        assert format_long_date(datetime(2025, 1, 9, 20, 0, tzinfo=UTC)) == "Jumat, 10 Januari 2025"

    def test_naive_datetime_is_utc(self):
        assert format_long_date(datetime(2025, 1, 9, 20, 0)) == "Jumat, 10 Januari 2025"

    def test_missing(self):
        assert format_long_date(None) == "-"


class TestDisplayPaymentMethod:
    def test_specific_method_wins(self):
        assert display_payment_method("bank_transfer", "Gateway Checkout") == "BANK TRANSFER"

    def test_falls_back_to_initial_method(self):
        assert display_payment_method(None, "Gateway Checkout") == "Gateway Checkout"
