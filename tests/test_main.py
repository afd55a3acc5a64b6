"""
SplitSave RWF - Command-Line Tests.

Tests for the argparse entry point and the batch pipeline.
"""

import json
from pathlib import Path

from openpyxl import load_workbook

from main import format_rwf, main
from splitsave.validator import DataValidator


def write_transfers(path: Path, body: str) -> Path:
    path.write_text(body, encoding="utf-8")
    return path


class TestSingleAmountCommands:
    """Tests for fee, split and savings commands."""

    def test_format_rwf_matches_validator(self) -> None:
        assert format_rwf(7_000_000) == "RWF 7,000,000"
        assert format_rwf(7_000_000) == DataValidator().format_rwf(7_000_000)

    def test_fee(self, capsys) -> None:
        assert main(["fee", "5000"]) == 0
        assert "fee RWF 100" in capsys.readouterr().out

    def test_fee_invalid(self, capsys) -> None:
        assert main(["fee", "10000001"]) == 1
        assert "invalid" in capsys.readouterr().out

    def test_split(self, capsys) -> None:
        assert main(["split", "11000"]) == 0

        out = capsys.readouterr().out
        assert "2 transfers" in out
        assert "RWF 10,000: fee RWF 100" in out
        assert "RWF 1,000: fee RWF 20" in out

    def test_split_invalid(self, capsys) -> None:
        assert main(["split", "0"]) == 1
        assert "invalid" in capsys.readouterr().out

    def test_savings(self, capsys) -> None:
        assert main(["savings", "11000"]) == 0

        out = capsys.readouterr().out
        assert "Original Fee:      RWF 250" in out
        assert "Optimised Fee:     RWF 120" in out
        assert "Savings:           RWF 130" in out

    def test_savings_invalid(self, capsys) -> None:
        assert main(["savings", "15000000"]) == 1

    def test_no_command_prints_help(self, capsys) -> None:
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()


class TestBatchCommand:
    """Tests for the batch pipeline."""

    def test_batch_writes_reports(self, tmp_path: Path, capsys) -> None:
        csv_path = write_transfers(
            tmp_path / "transfers.csv",
            "Reference,Amount\nRent,11000\nCar,\"RWF 7,000,000\"\n"
        )
        output_dir = tmp_path / "out"

        assert main(["batch", str(csv_path), "--output-dir", str(output_dir)]) == 0

        audit_files = list(output_dir.glob("savings_audit_*.json"))
        report_files = list(output_dir.glob("savings_report_*.xlsx"))
        assert len(audit_files) == 1
        assert len(report_files) == 1

        audit = json.loads(audit_files[0].read_text(encoding="utf-8"))
        assert audit["summary"]["total_savings"] == 130 + 500

        workbook = load_workbook(report_files[0])
        assert workbook.sheetnames == ["Savings Summary", "Transfer Plans"]

        out = capsys.readouterr().out
        assert "Validated 2 transfers" in out
        assert "Total Savings:     RWF 630" in out

    def test_batch_validation_errors(self, tmp_path: Path, capsys) -> None:
        csv_path = write_transfers(
            tmp_path / "transfers.csv",
            "Reference,Amount\nRent,abc\n"
        )

        assert main(["batch", str(csv_path), "--output-dir", str(tmp_path / "out")]) == 1
        assert "VALIDATION ERRORS (1 errors)" in capsys.readouterr().out
        assert not (tmp_path / "out").exists()

    def test_batch_missing_file(self, tmp_path: Path, capsys) -> None:
        assert main(["batch", str(tmp_path / "missing.csv")]) == 1
        assert "File not found" in capsys.readouterr().out

    def test_batch_missing_columns(self, tmp_path: Path, capsys) -> None:
        csv_path = write_transfers(tmp_path / "transfers.csv", "Name,Value\nRent,1\n")

        assert main(["batch", str(csv_path)]) == 1
        assert "Missing required columns" in capsys.readouterr().out


class TestBenchmarkCommand:
    """Tests for the benchmark command."""

    def test_benchmark_default_amounts(self, capsys) -> None:
        assert main(["benchmark"]) == 0

        out = capsys.readouterr().out
        assert out.count("Execution time:") == 6
        assert "Transactions sum: 10000000" in out

    def test_benchmark_invalid_amount(self, capsys) -> None:
        assert main(["benchmark", "2000", "0"]) == 1

        out = capsys.readouterr().out
        assert "Optimised transactions: [1000, 1000]" in out
        assert "invalid" in out
