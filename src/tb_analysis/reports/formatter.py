"""
Export row preparation and Excel formatting for trial balance reports.
"""

import xlsxwriter
import pandas as pd
from typing import Dict, List, Optional, Sequence

from tb_analysis.data.models import SummaryStats, TrialBalanceRecord


EXPORT_COLUMNS = [
    'Account Code', 'Account Description', 'Current Year Balance', 'Prior Year Balance',
    'Variance', 'Variance (%)', 'Flag', 'Notes', 'Requires Follow-up'
]

# Column widths in characters, by position in EXPORT_COLUMNS
EXPORT_COLUMN_WIDTHS = [15, 30, 20, 20, 18, 14, 12, 40, 18]


def build_export_rows(records: Sequence[TrialBalanceRecord],
                      notes: Optional[Dict[str, str]] = None,
                      follow_ups: Optional[Dict[str, bool]] = None) -> List[Dict[str, object]]:
    """
    Flatten records plus their annotations into export rows.

    Args:
        records: Classified records
        notes: Explanations keyed by account code
        follow_ups: Follow-up marks keyed by account code

    Returns:
        One dict per record, keyed by EXPORT_COLUMNS
    """
    notes = notes or {}
    follow_ups = follow_ups or {}

    return [
        {
            'Account Code': r.account_code,
            'Account Description': r.account_description,
            'Current Year Balance': r.current_year_balance,
            'Prior Year Balance': r.prior_year_balance,
            'Variance': r.variance,
            'Variance (%)': r.variance_percentage,
            'Flag': r.flag.value,
            'Notes': notes.get(r.account_code, ''),
            'Requires Follow-up': 'Yes' if follow_ups.get(r.account_code) else 'No',
        }
        for r in records
    ]


def build_summary_rows(summary: SummaryStats) -> List[Dict[str, object]]:
    """Summary sheet rows as metric/value pairs."""
    return [
        {'Summary': 'Total Accounts', 'Value': summary.total_accounts},
        {'Summary': 'Total Current Year Balance', 'Value': summary.total_current_year_balance},
        {'Summary': 'Total Prior Year Balance', 'Value': summary.total_prior_year_balance},
        {'Summary': 'Total Variance', 'Value': summary.total_variance},
        {'Summary': 'Flagged Items', 'Value': summary.flagged_items},
        {'Summary': 'Significant Variances', 'Value': summary.significant_items},
        {'Summary': 'Moderate Variances', 'Value': summary.moderate_items},
        {'Summary': 'Explanation Completion', 'Value': f"{summary.explanation_completion}%"},
    ]


def format_currency(value: float, decimals: int = 0) -> str:
    """Plain grouped amount, e.g. 1,250,000 or (1,250,000) for negatives."""
    text = f"{abs(value):,.{decimals}f}"
    return f"({text})" if value < 0 else text


def format_percentage(value: float) -> str:
    return f"{value:.2f}%"


class ExcelFormatter:
    """Excel formatting utilities for trial balance analysis reports."""

    def __init__(self):
        self.formats = {}

    def add_formats(self, workbook: xlsxwriter.Workbook) -> None:
        """Add standard formats to workbook."""
        self.formats = {
            'header': workbook.add_format({
                'bold': True,
                'bg_color': '#4f46e5',
                'font_color': 'white',
                'align': 'center',
                'valign': 'vcenter',
                'border': 1
            }),
            'significant': workbook.add_format({
                'bg_color': '#ff4d4d',
                'font_color': 'white',
                'bold': True,
                'border': 1
            }),
            'moderate': workbook.add_format({
                'bg_color': '#ffff99',
                'border': 1
            }),
            'none': workbook.add_format({
                'bg_color': '#ccffcc',
                'border': 1
            }),
            'normal': workbook.add_format({
                'border': 1
            }),
            'wrap': workbook.add_format({
                'text_wrap': True,
                'border': 1
            }),
            'currency': workbook.add_format({
                'num_format': '#,##0.00;(#,##0.00)',
                'border': 1
            }),
            'positive_variance': workbook.add_format({
                'font_color': '#16a34a',
                'num_format': '0.00%',
                'border': 1
            }),
            'negative_variance': workbook.add_format({
                'font_color': '#dc2626',
                'num_format': '0.00%',
                'border': 1
            }),
            'percentage': workbook.add_format({
                'num_format': '0.00%',
                'border': 1
            }),
        }

    def write_header(self, worksheet: xlsxwriter.worksheet.Worksheet, columns: Sequence[str]) -> None:
        for col_num, column in enumerate(columns):
            worksheet.write(0, col_num, column, self.formats['header'])

    def apply_trial_balance_formatting(self, worksheet: xlsxwriter.worksheet.Worksheet,
                                       df: pd.DataFrame, start_row: int = 1) -> None:
        """Apply number and flag formatting to the analysis sheet."""
        if len(df) == 0:
            return

        for i, (_, row) in enumerate(df.iterrows()):
            row_num = start_row + i

            worksheet.write(row_num, 0, row['Account Code'], self.formats['normal'])
            worksheet.write(row_num, 1, row['Account Description'], self.formats['normal'])

            for col, name in [(2, 'Current Year Balance'), (3, 'Prior Year Balance'), (4, 'Variance')]:
                worksheet.write_number(row_num, col, row[name], self.formats['currency'])

            # Stored as a percent value, Excel expects a fraction
            variance_pct = row['Variance (%)']
            if variance_pct > 0:
                pct_format = self.formats['positive_variance']
            elif variance_pct < 0:
                pct_format = self.formats['negative_variance']
            else:
                pct_format = self.formats['percentage']
            worksheet.write_number(row_num, 5, variance_pct / 100, pct_format)

            flag = row['Flag']
            worksheet.write(row_num, 6, flag, self.formats.get(flag, self.formats['normal']))

            worksheet.write(row_num, 7, row['Notes'], self.formats['wrap'])

            follow_up = row['Requires Follow-up']
            follow_up_format = self.formats['moderate'] if follow_up == 'Yes' else self.formats['normal']
            worksheet.write(row_num, 8, follow_up, follow_up_format)

    def set_column_widths(self, worksheet: xlsxwriter.worksheet.Worksheet, widths: Sequence[int]) -> None:
        for i, width in enumerate(widths):
            worksheet.set_column(i, i, width)

    def adjust_column_widths(self, worksheet: xlsxwriter.worksheet.Worksheet,
                             df: pd.DataFrame) -> None:
        """Adjust column widths based on content."""
        for i, column in enumerate(df.columns):
            max_length = len(str(column))

            for value in df.iloc[:, i]:
                if pd.notna(value):
                    max_length = max(max_length, len(str(value)))

            worksheet.set_column(i, i, min(max_length + 2, 50))
