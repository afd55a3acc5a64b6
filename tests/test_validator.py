"""
SplitSave RWF - Data Validator Tests.

Property-based and unit tests for DataValidator class.
Tests ensure correct CSV parsing, amount conversion and error
reporting with row numbers.
"""

import csv
import tempfile
from pathlib import Path

import pytest
from hypothesis import assume, given, settings
from hypothesis.strategies import composite, integers, sampled_from

from splitsave.schema import MAX_AMOUNT, TransferRequest
from splitsave.validator import DataValidator, ValidationError, ValidationResult


@composite
def valid_amount_strings(draw):
    """Generate valid amount strings in various RWF formats."""
    amount = draw(integers(min_value=1, max_value=MAX_AMOUNT))

    formats = [
        str(amount),                  # "1500000"
        f"{amount:,}",                # "1,500,000"
        f"RWF {amount:,}",            # "RWF 1,500,000"
        f"FRW{amount}",               # "FRW1500000"
        f"rwf {amount}",              # "rwf 1500000"
        f"{amount}.00",               # "1500000.00"
    ]
    return draw(sampled_from(formats)), amount


@composite
def invalid_amount_strings(draw):
    """Generate amount strings that should be rejected."""
    invalid_formats = [
        "",                      # Empty
        "   ",                   # Whitespace only
        "-50",                   # Negative
        "0",                     # Zero
        "abc",                   # Non-numeric
        "RWF abc",               # Prefix with non-numeric
        "100,50",                # European format
        "RWF 100,00",            # European format with prefix
        "1500.50",               # Fractional francs
        "1.2.3",                 # Multiple decimals
        "$100",                  # Wrong currency
        "10,000,001",            # Above transfer limit
        "1,5",                   # Short thousands group
        "1,500,00",              # Truncated last group
        "1,0,0,0",               # Comma between every digit
    ]
    return draw(sampled_from(invalid_formats))


@composite
def misplaced_comma_strings(draw):
    """Generate amounts with one comma that does not split off three digits."""
    digits = str(draw(integers(min_value=10, max_value=MAX_AMOUNT)))
    position = draw(integers(min_value=1, max_value=len(digits) - 1))
    assume(len(digits) - position != 3)
    return f"{digits[:position]},{digits[position:]}"


def write_csv(rows, header=None) -> str:
    """Writes rows to a temporary CSV and returns its path."""
    with tempfile.NamedTemporaryFile(
        mode="w", suffix=".csv", delete=False, newline="", encoding="utf-8"
    ) as f:
        writer = csv.writer(f)
        if header:
            writer.writerow(header)
        writer.writerows(rows)
        return f.name


class TestDataValidatorUnit:
    """Unit tests for DataValidator edge cases."""

    def setup_method(self) -> None:
        """Initialise DataValidator for each test."""
        self.validator = DataValidator()

    def test_parse_plain_number(self) -> None:
        result, error = self.validator._parse_amount("10000", "Amount", 2)
        assert error is None
        assert result == 10_000

    def test_parse_with_prefix_and_separators(self) -> None:
        result, error = self.validator._parse_amount("RWF 1,500,000", "Amount", 2)
        assert error is None
        assert result == 1_500_000

    def test_parse_with_zero_fraction(self) -> None:
        result, error = self.validator._parse_amount("2,000.00", "Amount", 2)
        assert error is None
        assert result == 2_000

    def test_parse_fractional_rejected(self) -> None:
        """Verify fractional francs are rejected."""
        result, error = self.validator._parse_amount("1500.50", "Amount", 6)
        assert result is None
        assert error.row_number == 6
        assert "whole number" in error.message

    @pytest.mark.parametrize("value", ["1,5", "1,500,00", "1,0,0,0", "15,00,000", ",500"])
    def test_parse_misplaced_comma_rejected(self, value: str) -> None:
        """Verify commas outside groups of three digits are rejected."""
        result, error = self.validator._parse_amount(value, "Amount", 5)
        assert result is None
        assert error.row_number == 5
        assert "valid number" in error.message

    def test_parse_spaced_thousands(self) -> None:
        result, error = self.validator._parse_amount("RWF 1 500 000", "Amount", 2)
        assert error is None
        assert result == 1_500_000

    def test_parse_european_format_rejected(self) -> None:
        result, error = self.validator._parse_amount("100,50", "Amount", 3)
        assert result is None
        assert "European format" in error.message

    def test_parse_negative_rejected(self) -> None:
        """Verify negative amounts are rejected with the supported range."""
        result, error = self.validator._parse_amount("-5000", "Amount", 12)
        assert result is None
        assert error.row_number == 12
        assert error.field_name == "Amount"
        assert "between RWF 1 and RWF 10,000,000" in error.message
        assert "-5000" in error.message

    def test_parse_above_limit_rejected(self) -> None:
        result, error = self.validator._parse_amount("15,000,000", "Amount", 4)
        assert result is None
        assert "between" in error.message

    def test_parse_empty_rejected(self) -> None:
        result, error = self.validator._parse_amount("", "Amount", 3)
        assert result is None
        assert "empty" in error.message.lower()

    def test_parse_none_rejected(self) -> None:
        result, error = self.validator._parse_amount(None, "Amount", 3)
        assert result is None
        assert "empty" in error.message.lower()

    def test_parse_non_numeric_rejected(self) -> None:
        result, error = self.validator._parse_amount("abc", "Amount", 7)
        assert result is None
        assert "valid number" in error.message.lower()

    def test_public_parse_amount(self) -> None:
        assert self.validator.parse_amount("FRW 11,000") == 11_000
        with pytest.raises(ValueError, match="valid number"):
            self.validator.parse_amount("eleven thousand")

    def test_error_message_format(self) -> None:
        """Verify error message format is client-ready."""
        error = ValidationError(
            row_number=12,
            field_name="Amount",
            value="-5000",
            message="Amount must be between RWF 1 and RWF 10,000,000 (received: '-5000')"
        )

        error_str = str(error)

        assert "Row 12" in error_str
        assert "Amount" in error_str

    def test_format_rwf(self) -> None:
        assert self.validator.format_rwf(1_500_000) == "RWF 1,500,000"

    def test_validate_rows_with_valid_data(self) -> None:
        rows = [
            {"Reference": "Rent", "Amount": "11000"},
            {"Reference": "Car", "Amount": "RWF 7,000,000"},
        ]

        result = self.validator.validate_rows(rows)

        assert result.is_valid
        assert result.valid_count == 2
        assert result.transfers[0] == TransferRequest("Rent", 11_000)
        assert result.transfers[1] == TransferRequest("Car", 7_000_000)

    def test_validate_rows_with_errors(self) -> None:
        """Verify errors are captured with row numbers."""
        rows = [
            {"Reference": "Valid", "Amount": "10000"},
            {"Reference": "Negative", "Amount": "-5000"},
            {"Reference": "", "Amount": "500"},
        ]

        result = self.validator.validate_rows(rows)

        assert not result.is_valid
        assert result.valid_count == 1
        assert result.error_count == 2
        assert [e.row_number for e in result.errors] == [3, 4]
        assert result.errors[1].field_name == "Reference"

    def test_validate_csv_file(self) -> None:
        temp_path = write_csv(
            [["Rent", "11000"], ["School fees", "RWF 300,000"]],
            header=["Reference", "Amount"]
        )

        try:
            result = self.validator.validate_csv(temp_path)

            assert result.is_valid
            assert result.valid_count == 2
            assert result.total_rows == 2
            assert result.transfers[1].amount == 300_000
        finally:
            Path(temp_path).unlink()

    def test_validate_csv_header_case_insensitive(self) -> None:
        temp_path = write_csv([["Rent", "11000"]], header=["reference", " AMOUNT "])

        try:
            result = self.validator.validate_csv(temp_path)

            assert result.is_valid
            assert result.transfers == [TransferRequest("Rent", 11_000)]
        finally:
            Path(temp_path).unlink()

    def test_validate_csv_without_header(self) -> None:
        temp_path = write_csv([["Rent", "11000"], ["Broken"]])

        try:
            result = self.validator.validate_csv(temp_path, has_header=False)

            assert result.total_rows == 2
            assert result.valid_count == 1
            assert result.errors[0].row_number == 2
            assert result.errors[0].field_name == "Row"
        finally:
            Path(temp_path).unlink()

    def test_validate_csv_without_header_skips_blank_lines(self) -> None:
        """Verify blank lines are ignored with or without a header."""
        rows = [["Rent", "11000"], [], ["Car", "5000"]]
        headerless_path = write_csv(rows)
        header_path = write_csv(rows, header=["Reference", "Amount"])

        try:
            headerless = self.validator.validate_csv(headerless_path, has_header=False)
            with_header = self.validator.validate_csv(header_path)

            assert headerless.is_valid
            assert headerless.total_rows == 2
            assert headerless.transfers == with_header.transfers
            assert [t.amount for t in headerless.transfers] == [11_000, 5_000]
        finally:
            Path(headerless_path).unlink()
            Path(header_path).unlink()

    def test_validate_csv_missing_columns(self) -> None:
        temp_path = write_csv([["Rent", "11000"]], header=["Reference", "Value"])

        try:
            with pytest.raises(ValueError, match="Missing required columns: Amount"):
                self.validator.validate_csv(temp_path)
        finally:
            Path(temp_path).unlink()

    def test_validate_csv_file_not_found(self) -> None:
        with pytest.raises(FileNotFoundError):
            self.validator.validate_csv("does_not_exist.csv")

    def test_empty_result_is_valid(self) -> None:
        result = ValidationResult()
        assert result.is_valid
        assert result.valid_count == 0


class TestDataValidatorProperties:
    """Property-based tests for amount parsing."""

    def setup_method(self) -> None:
        """Initialise DataValidator for each test."""
        self.validator = DataValidator()

    @given(valid_amount_strings())
    @settings(max_examples=300)
    def test_valid_amounts_parse_exactly(self, case) -> None:
        """
        Property: every supported format parses to the original amount.
        """
        amount_str, expected = case

        result, error = self.validator._parse_amount(amount_str, "Amount", 2)

        assert error is None, f"'{amount_str}' rejected: {error}"
        assert result == expected

    @given(invalid_amount_strings(), integers(min_value=2, max_value=1000))
    @settings(max_examples=100)
    def test_invalid_amounts_rejected_with_row(self, amount_str: str, row: int) -> None:
        """
        Property: invalid amounts produce an error carrying the row number.
        """
        result, error = self.validator._parse_amount(amount_str, "Amount", row)

        assert result is None
        assert error is not None
        assert error.row_number == row

    @given(misplaced_comma_strings())
    @settings(max_examples=200)
    def test_misplaced_commas_rejected(self, amount_str: str) -> None:
        """
        Property: a comma outside a three-digit group never yields an amount.
        """
        result, error = self.validator._parse_amount(amount_str, "Amount", 2)

        assert result is None, f"'{amount_str}' parsed as {result}"
        assert error is not None
