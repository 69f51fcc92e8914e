import pytest

from dattra.utils.currency import (
    currency_to_number,
    format_currency,
    format_procedure_code,
    mask_currency_input,
    mask_digits,
    parse_int,
)


class TestCurrencyToNumber:
    @pytest.mark.parametrize("text, expected", [
        ("R$ 1.234,56", 1234.56),
        ("1.234,56", 1234.56),
        ("R$ 0,00", 0.0),
        ("1000", 1000.0),
        ("12,5", 12.5),
    ])
    def test_parses_brazilian_format(self, text, expected):
        assert currency_to_number(text) == pytest.approx(expected)

    @pytest.mark.parametrize("text", ["", None, "abc", "R$", "1,2,3"])
    def test_unparseable_becomes_zero(self, text):
        assert currency_to_number(text) == 0.0

    def test_numbers_pass_through(self):
        assert currency_to_number(12.5) == 12.5
        assert currency_to_number(3) == 3.0


class TestParseInt:
    @pytest.mark.parametrize("text, expected", [
        ("10", 10), (" 7 ", 7), ("10%", 10), ("", 0), (None, 0), ("x1", 0), (4.9, 4),
    ])
    def test_parse(self, text, expected):
        assert parse_int(text) == expected


class TestFormatting:
    def test_format_currency(self):
        assert format_currency(1234.56) == "R$ 1.234,56"
        assert format_currency(0) == "R$ 0,00"
        assert format_currency(1000000) == "R$ 1.000.000,00"
        assert format_currency(538.4615) == "R$ 538,46"

    def test_format_negative_currency(self):
        assert format_currency(-10.5) == "-R$ 10,50"

    def test_formatted_value_parses_back(self):
        assert currency_to_number(format_currency(98765.43)) == pytest.approx(98765.43)

    def test_mask_currency_input_reads_cents(self):
        assert mask_currency_input("123456") == "R$ 1.234,56"
        assert mask_currency_input("R$ 1.234,567") == "R$ 12.345,67"
        assert mask_currency_input("5") == "R$ 0,05"
        assert mask_currency_input("") == ""

    def test_mask_digits(self):
        assert mask_digits("1a2b3") == "123"
        assert mask_digits(None) == ""


class TestProcedureCodeMask:
    @pytest.mark.parametrize("text, expected", [
        ("0415010012", "04.15.01.001-2"),
        ("04.15.01.001-2", "04.15.01.001-2"),
        ("041501001299", "04.15.01.001-2"),
        ("040", "04.0"),
        ("04150", "04.15.0"),
        ("041501001", "04.15.01.001"),
        ("", ""),
        ("abc", ""),
    ])
    def test_mask(self, text, expected):
        assert format_procedure_code(text) == expected
