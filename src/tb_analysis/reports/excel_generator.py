"""
Excel report generation for trial balance variance analysis.
"""

import logging
import pandas as pd
from pathlib import Path
from typing import Dict, Optional, Sequence

from tb_analysis.analysis.summary import calculate_summary_stats
from tb_analysis.config.settings import Settings
from tb_analysis.data.models import ThresholdConfig, TrialBalanceRecord
from tb_analysis.reports.formatter import (
    EXPORT_COLUMNS, EXPORT_COLUMN_WIDTHS, ExcelFormatter, build_export_rows, build_summary_rows
)


ANALYSIS_SHEET = 'Trial Balance Analysis'
SUMMARY_SHEET = 'Summary'
TEMPLATE_SHEET = 'Template'

TEMPLATE_ROWS = [
    ["1000", "Cash", 50000, 45000],
    ["1100", "Accounts Receivable", 125000, 100000],
    ["2000", "Accounts Payable", 75000, 60000],
]
TEMPLATE_COLUMNS = ["Account Code", "Account Description", "Balance (Current Year)", "Balance (Prior Year)"]


class ExcelGenerator:
    """Excel report generator for trial balance analysis results."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.formatter = ExcelFormatter()
        self.logger = logging.getLogger(__name__)

    def generate_report(self, records: Sequence[TrialBalanceRecord], output_file: str,
                        notes: Optional[Dict[str, str]] = None,
                        follow_ups: Optional[Dict[str, bool]] = None,
                        thresholds: Optional[ThresholdConfig] = None) -> str:
        """
        Write the analysis and summary sheets to a new workbook.

        Args:
            records: Classified records
            output_file: Destination .xlsx path
            notes: Explanations keyed by account code
            follow_ups: Follow-up marks keyed by account code
            thresholds: Thresholds the records were classified with

        Returns:
            Path of the written workbook
        """
        self.logger.info(f"Generating Excel report: {output_file}")
        Path(output_file).parent.mkdir(parents=True, exist_ok=True)

        df_analysis = pd.DataFrame(build_export_rows(records, notes, follow_ups), columns=EXPORT_COLUMNS)

        summary = calculate_summary_stats(records, notes)
        summary_rows = build_summary_rows(summary)
        if thresholds is not None:
            summary_rows.extend([
                {'Summary': 'Materiality Threshold', 'Value': f"{thresholds.materiality_threshold:g}%"},
                {'Summary': 'Significant Threshold', 'Value': f"{thresholds.significant_threshold:g}%"},
            ])
        df_summary = pd.DataFrame(summary_rows, columns=['Summary', 'Value'])

        with pd.ExcelWriter(output_file, engine='xlsxwriter') as writer:
            self.formatter.add_formats(writer.book)

            df_analysis.to_excel(writer, sheet_name=ANALYSIS_SHEET, index=False)
            worksheet = writer.sheets[ANALYSIS_SHEET]
            self.formatter.write_header(worksheet, EXPORT_COLUMNS)
            self.formatter.apply_trial_balance_formatting(worksheet, df_analysis)
            self.formatter.set_column_widths(worksheet, EXPORT_COLUMN_WIDTHS)
            worksheet.freeze_panes(1, 0)

            df_summary.to_excel(writer, sheet_name=SUMMARY_SHEET, index=False)
            summary_sheet = writer.sheets[SUMMARY_SHEET]
            self.formatter.write_header(summary_sheet, df_summary.columns)
            self.formatter.adjust_column_widths(summary_sheet, df_summary)

        self.logger.info(f"Excel report written: {len(df_analysis)} accounts -> {output_file}")
        return output_file

    def generate_template(self, output_file: str) -> str:
        """Write an empty upload template with example rows."""
        Path(output_file).parent.mkdir(parents=True, exist_ok=True)

        df_template = pd.DataFrame(TEMPLATE_ROWS, columns=TEMPLATE_COLUMNS)
        with pd.ExcelWriter(output_file, engine='xlsxwriter') as writer:
            self.formatter.add_formats(writer.book)
            df_template.to_excel(writer, sheet_name=TEMPLATE_SHEET, index=False)
            worksheet = writer.sheets[TEMPLATE_SHEET]
            self.formatter.write_header(worksheet, TEMPLATE_COLUMNS)
            self.formatter.adjust_column_widths(worksheet, df_template)

        self.logger.info(f"Template written to {output_file}")
        return output_file
