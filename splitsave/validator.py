"""
SplitSave RWF - Data Validation Module.

This module provides CSV validation and parsing for batches of transfers.
Amount strings are parsed through Decimal and must resolve to whole
francs inside the supported transfer range, with error reporting that
includes row numbers.

Rwanda Mobile Money Context:
    - Accepts RWF, FRW and RF currency prefixes
    - Comma is only accepted as a thousands separator
    - Amounts are whole francs between 1 and 10,000,000

Classes:
    ValidationError: A single row-level validation failure.
    ValidationResult: Container for validation outcomes.
    DataValidator: Main validation class for CSV processing.
"""

import csv
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List, Optional, Tuple, Union

from splitsave.schema import MAX_AMOUNT, MIN_AMOUNT, TransferRequest


@dataclass
class ValidationError:
    """
    Represents a single validation error with context.

    Attributes:
        row_number: The 1-based row number in the CSV (header is row 1).
        field_name: The name of the field that failed validation.
        value: The invalid value that was provided.
        message: A client-facing error message.
    """

    row_number: int
    field_name: str
    value: str
    message: str

    def __str__(self) -> str:
        """Returns a formatted error message for client display."""
        return f"Error: Row {self.row_number} '{self.field_name}' - {self.message}"


@dataclass
class ValidationResult:
    """
    Container for CSV validation results.

    Attributes:
        transfers: Successfully validated TransferRequest objects.
        errors: ValidationError objects for failed rows.
        total_rows: Total number of data rows processed.
    """

    transfers: List[TransferRequest] = field(default_factory=list)
    errors: List[ValidationError] = field(default_factory=list)
    total_rows: int = 0

    @property
    def is_valid(self) -> bool:
        """Returns True if validation produced no errors."""
        return len(self.errors) == 0

    @property
    def valid_count(self) -> int:
        """Returns the number of successfully validated transfers."""
        return len(self.transfers)

    @property
    def error_count(self) -> int:
        """Returns the number of validation errors."""
        return len(self.errors)


class DataValidator:
    """
    Validates CSV input and converts rows to TransferRequest objects.

    Attributes:
        REQUIRED_COLUMNS: List of mandatory CSV column names.

    Example:
        >>> validator = DataValidator()
        >>> result = validator.validate_csv("transfers.csv")
        >>> if result.is_valid:
        ...     for transfer in result.transfers:
        ...         print(transfer.reference, transfer.amount)
    """

    REQUIRED_COLUMNS = ["Reference", "Amount"]

    # Leading currency prefix (RWF, FRW or RF)
    CURRENCY_PREFIX_PATTERN = re.compile(r"^(RWF|FRW|RF)\s*", re.IGNORECASE)

    # Spacing inside an amount, e.g. "1 500 000"
    WHITESPACE_PATTERN = re.compile(r"\s")

    # Commas only between groups of three digits, e.g. "1,500,000.00"
    GROUPED_PATTERN = re.compile(r"^-?\d{1,3}(,\d{3})+(\.\d+)?$")

    def validate_csv(
        self,
        file_path: Union[str, Path],
        has_header: bool = True
    ) -> ValidationResult:
        """
        Validates a CSV file of transfers.

        Args:
            file_path: Path to the CSV file.
            has_header: Whether the CSV has a header row. Defaults to True.

        Returns:
            ValidationResult with transfers list and any errors.

        Raises:
            FileNotFoundError: If the CSV file does not exist.
            ValueError: If required columns are missing.
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(
                f"CSV file not found: {file_path}"
            )

        result = ValidationResult()

        with open(file_path, "r", encoding="utf-8-sig", newline="") as csvfile:
            if has_header:
                reader = csv.DictReader(csvfile)
                fieldnames = reader.fieldnames or []
                missing = self._check_required_columns(fieldnames)
                if missing:
                    raise ValueError(
                        f"Missing required columns: {', '.join(missing)}"
                    )

                column_map = self._map_columns(fieldnames)

                for row_num, row in enumerate(reader, start=2):
                    result.total_rows += 1
                    normalised = {
                        name: row.get(column_map[name]) or ""
                        for name in self.REQUIRED_COLUMNS
                    }
                    self._collect(result, normalised, row_num)
            else:
                reader = csv.reader(csvfile)
                for row_num, row in enumerate(reader, start=1):
                    # Blank lines are skipped, as DictReader does
                    if not row:
                        continue
                    result.total_rows += 1
                    if len(row) < 2:
                        result.errors.append(ValidationError(
                            row_number=row_num,
                            field_name="Row",
                            value=str(row),
                            message="Row must have at least 2 columns: "
                                    "Reference, Amount"
                        ))
                        continue

                    row_dict = {"Reference": row[0], "Amount": row[1]}
                    self._collect(result, row_dict, row_num)

        return result

    def validate_rows(
        self,
        rows: List[dict],
        start_row: int = 2
    ) -> ValidationResult:
        """
        Validates a list of row dictionaries.

        Args:
            rows: Dictionaries with "Reference" and "Amount" keys.
            start_row: Starting row number for error reporting.

        Returns:
            ValidationResult with transfers list and any errors.
        """
        result = ValidationResult()
        result.total_rows = len(rows)

        for idx, row in enumerate(rows):
            self._collect(result, row, start_row + idx)

        return result

    def parse_amount(self, value: str) -> int:
        """
        Parses a single amount string.

        Args:
            value: Amount such as "RWF 1,500,000".

        Returns:
            The amount as an integer.

        Raises:
            ValueError: If the value is not a valid transfer amount.
        """
        amount, error = self._parse_amount(value, "Amount", 0)
        if error is not None:
            raise ValueError(error.message)
        return amount

    def _collect(
        self,
        result: ValidationResult,
        row: dict,
        row_number: int
    ) -> None:
        """Validates one row and records the outcome on result."""
        transfer, errors = self._validate_row(row, row_number)
        if transfer:
            result.transfers.append(transfer)
        result.errors.extend(errors)

    def _check_required_columns(
        self,
        columns: List[str]
    ) -> List[str]:
        """
        Checks if all required columns are present (case-insensitive).

        Args:
            columns: List of column names from CSV header.

        Returns:
            List of missing column names (empty if all present).
        """
        columns_lower = [c.lower().strip() for c in columns]
        return [
            required for required in self.REQUIRED_COLUMNS
            if required.lower() not in columns_lower
        ]

    def _map_columns(self, columns: List[str]) -> dict:
        """Maps each required column name to its spelling in the header."""
        lookup = {c.lower().strip(): c for c in columns}
        return {
            required: lookup[required.lower()]
            for required in self.REQUIRED_COLUMNS
        }

    def _validate_row(
        self,
        row: dict,
        row_number: int
    ) -> Tuple[Optional[TransferRequest], List[ValidationError]]:
        """
        Validates a single row and converts to TransferRequest.

        Args:
            row: Dictionary with row data.
            row_number: Row number for error reporting.

        Returns:
            Tuple of (TransferRequest or None, list of errors).
        """
        errors: List[ValidationError] = []

        reference = (row.get("Reference") or "").strip()
        if not reference:
            errors.append(ValidationError(
                row_number=row_number,
                field_name="Reference",
                value=row.get("Reference") or "",
                message="Reference cannot be empty"
            ))

        amount, amount_error = self._parse_amount(
            row.get("Amount"),
            "Amount",
            row_number
        )
        if amount_error:
            errors.append(amount_error)

        if errors or amount is None:
            return None, errors

        return TransferRequest(reference=reference, amount=amount), errors

    def _parse_amount(
        self,
        value: Optional[str],
        field_name: str,
        row_number: int
    ) -> Tuple[Optional[int], Optional[ValidationError]]:
        """
        Parses a string value to a whole-franc amount.

        Handles various RWF formats:
        - "1500000" (plain number)
        - "1,500,000" (with thousands separator)
        - "RWF 1,500,000" / "FRW1500000" (with currency prefix)
        - "1500000.00" (decimal point with zero fraction)

        Args:
            value: String value to parse.
            field_name: Name of the field for error messages.
            row_number: Row number for error messages.

        Returns:
            Tuple of (int value or None, ValidationError or None).
        """
        if value is None:
            value = ""

        original_value = value
        value = value.strip()

        def error(message: str) -> Tuple[None, ValidationError]:
            return None, ValidationError(
                row_number=row_number,
                field_name=field_name,
                value=original_value,
                message=message
            )

        if not value:
            return error(f"{field_name} cannot be empty")

        value = self.CURRENCY_PREFIX_PATTERN.sub("", value)

        # Comma followed by exactly two digits is a decimal comma, e.g. "100,50"
        if re.match(r"^-?\d+,\d{2}$", value):
            return error(
                f"{field_name} appears to use European format (comma as decimal). "
                f"Please use period as decimal separator (e.g., '100.00' not '100,00')"
            )

        cleaned = self.WHITESPACE_PATTERN.sub("", value)

        if "," in cleaned:
            if not self.GROUPED_PATTERN.match(cleaned):
                return error(
                    f"{field_name} must be a valid number "
                    f"(received: '{original_value}')"
                )
            cleaned = cleaned.replace(",", "")

        if not re.match(r"^-?\d+(\.\d+)?$", cleaned):
            return error(
                f"{field_name} must be a valid number "
                f"(received: '{original_value}')"
            )

        try:
            decimal_value = Decimal(cleaned)
        except InvalidOperation:
            return error(
                f"{field_name} must be a valid number "
                f"(received: '{original_value}')"
            )

        if decimal_value != decimal_value.to_integral_value():
            return error(
                f"{field_name} must be a whole number of francs "
                f"(received: '{original_value}')"
            )

        amount = int(decimal_value)

        if amount < MIN_AMOUNT or amount > MAX_AMOUNT:
            return error(
                f"{field_name} must be between {self.format_rwf(MIN_AMOUNT)} "
                f"and {self.format_rwf(MAX_AMOUNT)} "
                f"(received: '{original_value}')"
            )

        return amount, None

    def format_rwf(self, amount: int) -> str:
        """
        Formats an amount as an RWF currency string.

        Args:
            amount: Amount to format.

        Returns:
            Formatted string like "RWF 1,500,000".
        """
        return f"RWF {amount:,}"
