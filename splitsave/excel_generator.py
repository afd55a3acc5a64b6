"""
SplitSave RWF - Excel Report Generation Module.

This module generates Excel reports for batch fee optimisation. A
Savings Summary tab gives the totals and the fee schedule at a glance,
and a Transfer Plans tab lists the recommended split for every transfer.

Classes:
    ExcelReporter: Generates Excel workbooks from optimisation snapshots.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from openpyxl import Workbook
from openpyxl.styles import (
    Alignment,
    Border,
    Font,
    PatternFill,
    Side,
)
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from splitsave.schema import FEE_BRACKETS, OptimisationSnapshot, TransferAnalysis


class ExcelReporter:
    """
    Generates Excel reports for fee optimisation results.

    Attributes:
        RWF_FORMAT: Excel number format for RWF amounts.

    Example:
        >>> reporter = ExcelReporter()
        >>> reporter.generate_report(snapshot, "savings_report.xlsx")
    """

    RWF_FORMAT = '"RWF" #,##0'

    SAVINGS_FILL = PatternFill(
        start_color="C6EFCE",
        end_color="C6EFCE",
        fill_type="solid"
    )

    HEADER_FONT = Font(bold=True, color="FFFFFF")
    HEADER_FILL = PatternFill(
        start_color="FFC000",
        end_color="FFC000",
        fill_type="solid"
    )
    HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center")

    THIN_BORDER = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin")
    )

    DETAIL_HEADERS = [
        "Reference",
        "Amount",
        "Original Fee",
        "Optimised Fee",
        "Savings",
        "Transfers",
        "Plan",
    ]

    # 1-based columns holding RWF amounts on the detail sheet
    CURRENCY_COLUMNS = (2, 3, 4, 5)

    def generate_report(
        self,
        snapshot: OptimisationSnapshot,
        output_path: Union[str, Path]
    ) -> None:
        """
        Generates a complete Excel report from optimisation results.

        Args:
            snapshot: Complete optimisation snapshot.
            output_path: Path for the output .xlsx file.
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        workbook = Workbook()
        workbook.remove(workbook.active)

        self._create_summary_sheet(workbook, snapshot)
        self._create_detail_sheet(workbook, snapshot)

        workbook.save(output_path)

    def _create_summary_sheet(
        self,
        workbook: Workbook,
        snapshot: OptimisationSnapshot
    ) -> None:
        """
        Creates the Savings Summary sheet with totals and the fee schedule.

        Args:
            workbook: Target workbook.
            snapshot: Optimisation data.
        """
        ws = workbook.create_sheet("Savings Summary")

        ws["A1"] = "SplitSave RWF - Savings Summary"
        ws["A1"].font = Font(bold=True, size=16)
        ws.merge_cells("A1:D1")

        ws["A3"] = "Report Generated:"
        ws["B3"] = datetime.now().strftime("%Y-%m-%d %H:%M")
        ws["A4"] = "Analysis Date:"
        ws["B4"] = snapshot.timestamp.strftime("%Y-%m-%d %H:%M")
        ws["A5"] = "Version:"
        ws["B5"] = snapshot.version

        ws["A7"] = "BATCH OVERVIEW"
        ws["A7"].font = Font(bold=True, size=14)
        ws.merge_cells("A7:D7")

        metrics = [
            ("Total Amount", snapshot.total_amount),
            ("Fees Without Splitting", snapshot.total_original_fee),
            ("Fees With Splitting", snapshot.total_optimized_fee),
            ("Total Savings", snapshot.total_savings),
        ]

        row = 9
        for label, value in metrics:
            ws[f"A{row}"] = label
            ws[f"A{row}"].font = Font(bold=True)
            ws[f"B{row}"] = value
            ws[f"B{row}"].number_format = self.RWF_FORMAT
            row += 1

        ws[f"A{row}"] = "Transfers Analysed:"
        ws[f"A{row}"].font = Font(bold=True)
        ws[f"B{row}"] = len(snapshot.transfers)
        row += 1
        ws[f"A{row}"] = "Transfers Split:"
        ws[f"A{row}"].font = Font(bold=True)
        ws[f"B{row}"] = snapshot.split_count

        row += 2
        ws[f"A{row}"] = "FEE SCHEDULE"
        ws[f"A{row}"].font = Font(bold=True, size=14)
        ws.merge_cells(f"A{row}:D{row}")

        row += 2
        schedule = [("From", "To", "Fee")] + [
            (bracket.low, bracket.high, bracket.fee)
            for bracket in FEE_BRACKETS
        ]
        for i, values in enumerate(schedule):
            for col, value in zip(["A", "B", "C"], values):
                cell = ws[f"{col}{row}"]
                cell.value = value
                cell.border = self.THIN_BORDER
                if i == 0:
                    cell.font = self.HEADER_FONT
                    cell.fill = self.HEADER_FILL
                    cell.alignment = self.HEADER_ALIGNMENT
                else:
                    cell.number_format = self.RWF_FORMAT
            row += 1

        self._auto_adjust_columns(ws)

    def _create_detail_sheet(
        self,
        workbook: Workbook,
        snapshot: OptimisationSnapshot
    ) -> None:
        """
        Creates the Transfer Plans sheet with one row per transfer.

        Args:
            workbook: Target workbook.
            snapshot: Optimisation data.
        """
        ws = workbook.create_sheet("Transfer Plans")

        for col, header in enumerate(self.DETAIL_HEADERS, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = self.HEADER_FONT
            cell.fill = self.HEADER_FILL
            cell.alignment = self.HEADER_ALIGNMENT
            cell.border = self.THIN_BORDER

        for row_idx, analysis in enumerate(snapshot.transfers, start=2):
            row_data = [
                analysis.transfer.reference,
                analysis.transfer.amount,
                analysis.savings.original_fee,
                analysis.savings.optimized_fee,
                analysis.savings.savings,
                analysis.chunk_count,
                self._format_plan(analysis),
            ]

            for col_idx, value in enumerate(row_data, start=1):
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.border = self.THIN_BORDER
                if col_idx in self.CURRENCY_COLUMNS:
                    cell.number_format = self.RWF_FORMAT

            fill = self._get_savings_fill(analysis)
            if fill:
                for col_idx in range(1, len(self.DETAIL_HEADERS) + 1):
                    ws.cell(row=row_idx, column=col_idx).fill = fill

        self._auto_adjust_columns(ws)

    def _format_plan(self, analysis: TransferAnalysis) -> str:
        """Renders a plan as "10,000 + 1,000"."""
        return " + ".join(f"{chunk:,}" for chunk in analysis.plan)

    def _get_savings_fill(self, analysis: TransferAnalysis) -> Optional[PatternFill]:
        """Returns the highlight fill for transfers that save money, else None."""
        if analysis.savings.savings > 0:
            return self.SAVINGS_FILL
        return None

    def _auto_adjust_columns(self, worksheet: Worksheet) -> None:
        """
        Auto-adjusts column widths based on content.

        Args:
            worksheet: Target worksheet.
        """
        for col_idx in range(1, worksheet.max_column + 1):
            column_letter = get_column_letter(col_idx)
            max_length = 0

            for row_idx in range(1, worksheet.max_row + 1):
                value = worksheet.cell(row=row_idx, column=col_idx).value
                if value is not None:
                    max_length = max(max_length, len(str(value)))

            worksheet.column_dimensions[column_letter].width = max(max_length + 2, 10)

    def generate_filename(self, prefix: str = "savings_report") -> str:
        """
        Generates a timestamped filename for reports.

        Args:
            prefix: Filename prefix. Defaults to "savings_report".

        Returns:
            Filename like "savings_report_2025-04-06_143052.xlsx".
        """
        timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
        return f"{prefix}_{timestamp}.xlsx"
