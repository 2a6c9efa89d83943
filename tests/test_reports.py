"""
Unit tests for Excel and PDF report generation.
"""

import pytest
import pandas as pd
import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tb_analysis.analysis.variance_engine import classify, ingest
from tb_analysis.config.settings import Settings
from tb_analysis.data.loader import TrialBalanceLoader
from tb_analysis.data.models import ThresholdConfig
from tb_analysis.reports.excel_generator import ANALYSIS_SHEET, SUMMARY_SHEET, ExcelGenerator
from tb_analysis.reports.formatter import EXPORT_COLUMNS, build_export_rows, format_currency
from tb_analysis.reports.pdf_generator import PDFGenerator, truncate


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def records():
    return classify(ingest([
        {'account_code': '1000', 'account_description': 'Cash',
         'current_year_balance': 120000, 'prior_year_balance': 100000},
        {'account_code': '1100', 'account_description': 'Accounts Receivable - Trade Debtors',
         'current_year_balance': 150000, 'prior_year_balance': 100000},
        {'account_code': '2000', 'account_description': 'Accounts Payable',
         'current_year_balance': -105000, 'prior_year_balance': -100000},
    ]), ThresholdConfig())


class TestExportRows:

    def test_build_export_rows(self, records):
        rows = build_export_rows(records, {'1000': 'Price increase'}, {'1100': True})

        assert list(rows[0].keys()) == EXPORT_COLUMNS
        assert rows[0]['Notes'] == 'Price increase'
        assert rows[0]['Flag'] == 'moderate'
        assert rows[0]['Variance (%)'] == pytest.approx(20.0)
        assert rows[1]['Requires Follow-up'] == 'Yes'
        assert rows[2]['Requires Follow-up'] == 'No'

    def test_format_currency(self):
        assert format_currency(1250000) == '1,250,000'
        assert format_currency(-500.5, decimals=2) == '(500.50)'

    def test_truncate(self):
        assert truncate('Accounts Receivable - Trade Debtors') == 'Accounts Receivable ...'
        assert truncate('Cash') == 'Cash'


class TestExcelGenerator:

    def test_generate_report(self, settings, records, tmp_path):
        output = tmp_path / "out" / "analysis.xlsx"

        ExcelGenerator(settings).generate_report(
            records, str(output), notes={'1000': 'Price increase'},
            follow_ups={'1100': True}, thresholds=ThresholdConfig()
        )

        sheets = pd.read_excel(output, sheet_name=None, engine='openpyxl')
        assert set(sheets) == {ANALYSIS_SHEET, SUMMARY_SHEET}

        analysis = sheets[ANALYSIS_SHEET]
        assert list(analysis.columns) == EXPORT_COLUMNS
        assert len(analysis) == 3
        assert list(analysis['Flag']) == ['moderate', 'significant', 'none']
        # Percent column is written as a fraction for Excel's % format
        assert analysis['Variance (%)'].iloc[0] == pytest.approx(0.2)

        summary = dict(zip(sheets[SUMMARY_SHEET]['Summary'], sheets[SUMMARY_SHEET]['Value']))
        assert summary['Total Accounts'] == 3
        assert summary['Flagged Items'] == 2
        assert summary['Explanation Completion'] == '50%'
        assert summary['Materiality Threshold'] == '10%'

    def test_generate_report_empty(self, settings, tmp_path):
        output = tmp_path / "empty.xlsx"

        ExcelGenerator(settings).generate_report([], str(output))

        analysis = pd.read_excel(output, sheet_name=ANALYSIS_SHEET, engine='openpyxl')
        assert analysis.empty
        assert list(analysis.columns) == EXPORT_COLUMNS

    def test_template_round_trips_through_loader(self, settings, tmp_path):
        output = tmp_path / "template.xlsx"

        ExcelGenerator(settings).generate_template(str(output))
        loaded = TrialBalanceLoader(settings).load_records(str(output))

        assert [r.account_code for r in loaded] == ['1000', '1100', '2000']
        assert loaded[1].variance_percentage == pytest.approx(25.0)


class TestPDFGenerator:

    def test_generate_report(self, records, tmp_path):
        output = tmp_path / "analysis.pdf"

        PDFGenerator().generate_report(
            records, str(output), notes={'1000': 'Price <increase> & mix'}, follow_ups={'1100': True}
        )

        assert output.exists()
        assert output.read_bytes().startswith(b'%PDF')

    def test_generate_report_empty(self, tmp_path):
        output = tmp_path / "empty.pdf"

        PDFGenerator().generate_report([], str(output))

        assert output.stat().st_size > 0
