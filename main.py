"""
SplitSave RWF - Main Entry Point.

Mobile money fee optimiser. Looks up transfer fees, recommends how to
split large transfers, and processes batches of transfers into audit
and Excel reports.

Usage:
    python main.py fee <amount>
    python main.py split <amount>
    python main.py savings <amount>
    python main.py batch <input_csv> [--output-dir <dir>]
    python main.py benchmark [<amount> ...]

Example:
    python main.py split 11000
    python main.py batch transfers.csv --output-dir reports/
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from splitsave import __version__
from splitsave.audit import AuditLogger
from splitsave.calculator import (
    TransferOptimiser,
    benchmark_optimisation,
    calculate_fee,
    calculate_fees_savings,
    optimize_transactions,
)
from splitsave.excel_generator import ExcelReporter
from splitsave.schema import OptimisationSnapshot
from splitsave.validator import DataValidator


DEFAULT_BENCHMARK_AMOUNTS = [
    1_000,
    10_000,
    100_000,
    1_000_000,
    5_000_000,
    10_000_000,
]


def print_header() -> None:
    """Prints the application header."""
    print("=" * 60)
    print("  SplitSave RWF - Mobile Money Fee Optimiser")
    print(f"  Version: {__version__}")
    print("=" * 60)
    print()


def format_rwf(amount: int) -> str:
    """
    Formats an amount for console output.

    Args:
        amount: Amount in RWF.

    Returns:
        Formatted string like "RWF 1,500,000".
    """
    return DataValidator().format_rwf(amount)


def print_summary(snapshot: OptimisationSnapshot) -> None:
    """
    Prints a summary of a batch run to the console.

    Args:
        snapshot: Optimisation snapshot with results.
    """
    print("\n" + "=" * 60)
    print("  OPTIMISATION COMPLETE")
    print("=" * 60)
    print()

    print("  BATCH OVERVIEW")
    print("  " + "-" * 40)
    print(f"  Total Amount:      {format_rwf(snapshot.total_amount)}")
    print(f"  Fees (single):     {format_rwf(snapshot.total_original_fee)}")
    print(f"  Fees (split):      {format_rwf(snapshot.total_optimized_fee)}")
    print(f"  Total Savings:     {format_rwf(snapshot.total_savings)}")
    print()
    print(f"  Transfers:         {len(snapshot.transfers)}")
    print(f"  Split:             {snapshot.split_count}")
    print()


def run_fee(amount: int) -> int:
    """
    Prints the single-transfer fee for an amount.

    Args:
        amount: Transfer amount.

    Returns:
        Exit code (0 for success, 1 for invalid amounts).
    """
    fee = calculate_fee(amount)
    if fee is None:
        print(f"  {format_rwf(amount)}: invalid")
        return 1
    print(f"  {format_rwf(amount)}: fee {format_rwf(fee)}")
    return 0


def run_split(amount: int) -> int:
    """
    Prints the split plan for an amount with per-transfer fees.

    Args:
        amount: Total amount to split.

    Returns:
        Exit code (0 for success, 1 for invalid amounts).
    """
    plan = optimize_transactions(amount)
    if not plan:
        print(f"  {format_rwf(amount)}: invalid")
        return 1

    print(f"  Plan for {format_rwf(amount)} ({len(plan)} transfers):")
    for chunk in plan:
        print(f"  - {format_rwf(chunk)}: fee {format_rwf(calculate_fee(chunk))}")
    return 0


def run_savings(amount: int) -> int:
    """
    Prints original fee, optimised fee and savings for an amount.

    Args:
        amount: Total amount to analyse.

    Returns:
        Exit code (0 for success, 1 for invalid amounts).
    """
    result = calculate_fees_savings(amount)
    if result is None:
        print(f"  {format_rwf(amount)}: invalid")
        return 1

    print(f"  Amount:            {format_rwf(amount)}")
    print(f"  Original Fee:      {format_rwf(result.original_fee)}")
    print(f"  Optimised Fee:     {format_rwf(result.optimized_fee)}")
    print(f"  Savings:           {format_rwf(result.savings)}")
    return 0


def run_batch(
    csv_path: Path,
    output_dir: Path
) -> int:
    """
    Runs the complete batch pipeline.

    Args:
        csv_path: Path to input CSV file.
        output_dir: Directory for output files.

    Returns:
        Exit code (0 for success, 1 for errors).
    """
    print_header()

    print(f"  Loading: {csv_path}")
    validator = DataValidator()

    try:
        result = validator.validate_csv(csv_path)
    except FileNotFoundError:
        print(f"\n  ❌ ERROR: File not found: {csv_path}")
        return 1
    except ValueError as e:
        print(f"\n  ❌ ERROR: {e}")
        return 1

    if not result.is_valid:
        print(f"\n  ❌ VALIDATION ERRORS ({result.error_count} errors):")
        for error in result.errors[:10]:
            print(f"     {error}")
        if result.error_count > 10:
            print(f"     ... and {result.error_count - 10} more errors")
        return 1

    print(f"  ✓ Validated {result.valid_count} transfers")

    print("  Optimising transfers...")
    snapshot = TransferOptimiser().analyse_batch(result.transfers)

    output_dir.mkdir(parents=True, exist_ok=True)

    audit_logger = AuditLogger()
    audit_path = output_dir / audit_logger.generate_filename("savings_audit")
    audit_logger.save_to_file(snapshot, audit_path)
    print(f"  ✓ Audit log saved: {audit_path}")

    excel_reporter = ExcelReporter()
    excel_path = output_dir / excel_reporter.generate_filename("savings_report")
    excel_reporter.generate_report(snapshot, excel_path)
    print(f"  ✓ Excel report saved: {excel_path}")

    print_summary(snapshot)

    print("=" * 60)
    print("  SplitSave RWF - Optimisation Complete")
    print("=" * 60)

    return 0


def run_benchmark(amounts: Sequence[int]) -> int:
    """
    Times the optimiser for each amount and prints the outcome.

    Args:
        amounts: Amounts to benchmark.

    Returns:
        Exit code (0 for success, 1 if any amount was invalid).
    """
    print_header()
    exit_code = 0

    for amount in amounts:
        result = benchmark_optimisation(amount)
        if result is None:
            print(f"  {format_rwf(amount)}: invalid")
            print("---")
            exit_code = 1
            continue

        print(f"  Amount: {format_rwf(result.amount)}")
        print(f"  Optimised transactions: {result.plan}")
        print(f"  Default fee: {result.default_fee}, Optimised fee: {result.total_fee}")
        print(f"  Transactions sum: {sum(result.plan)}")
        print(f"  Execution time: {result.execution_time_ms:.4f} ms")
        print("---")

    return exit_code


def build_parser() -> argparse.ArgumentParser:
    """Builds the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="splitsave",
        description="SplitSave RWF - Mobile Money Fee Optimiser"
    )
    sub = parser.add_subparsers(dest="command")

    for name, help_text in [
        ("fee", "show the fee for a single transfer"),
        ("split", "show the recommended split plan"),
        ("savings", "compare single-transfer and split fees"),
    ]:
        command = sub.add_parser(name, help=help_text)
        command.add_argument("amount", type=int, help="amount in RWF")

    batch = sub.add_parser("batch", help="optimise a CSV of transfers")
    batch.add_argument(
        "csv_file",
        type=Path,
        help="Path to transfer CSV file (Reference, Amount)"
    )
    batch.add_argument(
        "--output-dir",
        type=Path,
        default=Path("output"),
        help="Output directory for reports (default: output/)"
    )

    benchmark = sub.add_parser("benchmark", help="time the optimiser")
    benchmark.add_argument(
        "amounts",
        type=int,
        nargs="*",
        help="amounts to benchmark (default: 1,000 to 10,000,000)"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command-line arguments. Defaults to sys.argv.

    Returns:
        Exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "fee":
        return run_fee(args.amount)
    if args.command == "split":
        return run_split(args.amount)
    if args.command == "savings":
        return run_savings(args.amount)
    if args.command == "batch":
        return run_batch(args.csv_file, args.output_dir)
    if args.command == "benchmark":
        return run_benchmark(args.amounts or DEFAULT_BENCHMARK_AMOUNTS)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
