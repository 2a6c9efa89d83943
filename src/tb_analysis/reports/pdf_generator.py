"""
PDF report generation for trial balance variance analysis.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from tb_analysis.analysis.summary import calculate_summary_stats
from tb_analysis.data.models import SummaryStats, TrialBalanceRecord, VarianceFlag
from tb_analysis.reports.formatter import format_currency, format_percentage


HEADER_COLOR = colors.HexColor('#4F46E5')
FLAG_COLORS = {
    VarianceFlag.SIGNIFICANT: colors.HexColor('#FECACA'),
    VarianceFlag.MODERATE: colors.HexColor('#FEF08A'),
}
DETAIL_COLUMNS = ['Code', 'Description', 'Current Year', 'Prior Year', 'Variance',
                  'Variance (%)', 'Flag', 'Notes', 'Follow-up']
DETAIL_WIDTHS = [20 * mm, 40 * mm, 27 * mm, 27 * mm, 27 * mm, 20 * mm, 20 * mm, 50 * mm, 18 * mm]
DESCRIPTION_LIMIT = 20


def truncate(text: str, limit: int = DESCRIPTION_LIMIT) -> str:
    return text[:limit] + '...' if len(text) > limit else text


class PDFGenerator:
    """
    Generates a landscape PDF report of a trial balance analysis.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.styles = getSampleStyleSheet()
        self.styles.add(ParagraphStyle(
            name='ReportTitle',
            parent=self.styles['Heading1'],
            fontSize=18,
            spaceAfter=6,
            alignment=TA_LEFT,
        ))
        self.styles.add(ParagraphStyle(
            name='CellText',
            parent=self.styles['Normal'],
            fontSize=7,
            leading=9,
        ))

    def generate_report(self, records: Sequence[TrialBalanceRecord], output_file: str,
                        notes: Optional[Dict[str, str]] = None,
                        follow_ups: Optional[Dict[str, bool]] = None,
                        summary: Optional[SummaryStats] = None) -> str:
        """
        Generate the PDF report.

        Args:
            records: Classified records
            output_file: Destination .pdf path
            notes: Explanations keyed by account code
            follow_ups: Follow-up marks keyed by account code
            summary: Precomputed summary; derived from records when omitted

        Returns:
            Path to generated PDF file
        """
        self.logger.info(f"Generating PDF report: {output_file}")
        Path(output_file).parent.mkdir(parents=True, exist_ok=True)

        notes = notes or {}
        follow_ups = follow_ups or {}
        if summary is None:
            summary = calculate_summary_stats(records, notes)

        doc = SimpleDocTemplate(
            output_file,
            pagesize=landscape(A4),
            rightMargin=14 * mm,
            leftMargin=14 * mm,
            topMargin=14 * mm,
            bottomMargin=14 * mm,
        )

        story = [
            Paragraph("Trial Balance Analysis Report", self.styles['ReportTitle']),
            Paragraph(f"Generated on: {datetime.now().strftime('%d %B %Y')}", self.styles['Normal']),
            Spacer(1, 8 * mm),
            Paragraph("Summary Statistics", self.styles['Heading3']),
            self._create_summary_table(summary),
            Spacer(1, 10 * mm),
            self._create_detail_table(records, notes, follow_ups),
        ]

        doc.build(story)
        self.logger.info(f"PDF report generated successfully: {output_file}")
        return output_file

    def _create_summary_table(self, summary: SummaryStats) -> Table:
        data = [
            ['Metric', 'Value'],
            ['Total Accounts', str(summary.total_accounts)],
            ['Current Year Total', format_currency(summary.total_current_year_balance)],
            ['Prior Year Total', format_currency(summary.total_prior_year_balance)],
            ['Total Variance', format_currency(summary.total_variance)],
            ['Flagged Items', str(summary.flagged_items)],
            ['- Significant Variances', str(summary.significant_items)],
            ['- Moderate Variances', str(summary.moderate_items)],
            ['Explanation Completion', f"{summary.explanation_completion}%"],
        ]

        table = Table(data, colWidths=[70 * mm, 50 * mm], hAlign='LEFT')
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), HEADER_COLOR),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('ALIGN', (1, 1), (1, -1), 'RIGHT'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ]))
        return table

    def _create_detail_table(self, records: Sequence[TrialBalanceRecord],
                             notes: Dict[str, str], follow_ups: Dict[str, bool]) -> Table:
        data: List[list] = [DETAIL_COLUMNS]
        style = [
            ('BACKGROUND', (0, 0), (-1, 0), HEADER_COLOR),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 7),
            ('ALIGN', (2, 1), (5, -1), 'RIGHT'),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ]

        for row_num, record in enumerate(records, start=1):
            data.append([
                record.account_code,
                truncate(record.account_description),
                format_currency(record.current_year_balance),
                format_currency(record.prior_year_balance),
                format_currency(record.variance),
                format_percentage(record.variance_percentage),
                record.flag.value if record.flag != VarianceFlag.NONE else '',
                Paragraph(escape(notes.get(record.account_code, '')), self.styles['CellText']),
                'Yes' if follow_ups.get(record.account_code) else 'No',
            ])
            if record.flag in FLAG_COLORS:
                style.append(('BACKGROUND', (6, row_num), (6, row_num), FLAG_COLORS[record.flag]))

        table = Table(data, colWidths=DETAIL_WIDTHS, repeatRows=1)
        table.setStyle(TableStyle(style))
        return table
