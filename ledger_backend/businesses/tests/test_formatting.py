# businesses/tests/test_formatting.py

from decimal import Decimal
from types import SimpleNamespace

from django.test import SimpleTestCase

from businesses.services.formatting import format_amount, format_for_setting


class CurrencyFormattingTests(SimpleTestCase):
    def test_default_taka_format(self):
        self.assertEqual(format_amount(Decimal("1234567.5")), "৳ 1,234,567.50")
        self.assertEqual(format_amount("0"), "৳ 0.00")
        self.assertEqual(format_amount(None), "৳ 0.00")

    def test_negative_and_rounding(self):
        self.assertEqual(format_amount("-1500.005"), "-৳ 1,500.01")

    def test_custom_separators(self):
        setting = SimpleNamespace(
            currency_symbol="€", decimal_separator=",", thousand_separator="."
        )
        self.assertEqual(format_for_setting("9876543.21", setting), "€ 9.876.543,21")

    def test_no_symbol_no_grouping(self):
        self.assertEqual(
            format_amount("1000", symbol="", thousand_separator=""), "1000.00"
        )

    def test_missing_setting_uses_defaults(self):
        self.assertEqual(format_for_setting("50", None), "৳ 50.00")
