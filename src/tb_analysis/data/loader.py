"""
Trial balance loading: reads an upload, maps its columns and builds records.
"""

import logging
import pandas as pd
from pathlib import Path
from typing import Iterable, List, Optional

from tb_analysis.analysis.variance_engine import build_record
from tb_analysis.config.settings import Settings
from tb_analysis.data.models import ColumnMapping, TrialBalanceRecord
from tb_analysis.utils.calculations import parse_amount


MAPPING_FIELDS = ['account_code', 'account_description', 'current_year_balance', 'prior_year_balance']

EXCEL_ENGINES = {'.xlsx': 'openpyxl', '.xls': 'xlrd'}


class TrialBalanceLoader:
    """Excel/CSV trial balance loader."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.logger = logging.getLogger(__name__)

    def load_records(self, file_path: str,
                     mapping: Optional[ColumnMapping] = None) -> List[TrialBalanceRecord]:
        """
        Load trial balance records from a spreadsheet.

        Args:
            file_path: Path to an .xlsx, .xls or .csv file
            mapping: Column mapping; detected from the headers when omitted

        Returns:
            Unclassified records in file order
        """
        df = self.read_file(file_path)

        if mapping is None:
            mapping = self.detect_column_mapping(df.columns)

        return self.to_records(df, mapping)

    def read_file(self, file_path: str) -> pd.DataFrame:
        """
        Read the first sheet of a workbook, or a CSV file.

        Every cell is read as text so account codes keep leading and trailing
        zeros; balances are parsed later by ``parse_amount``.
        """
        self.logger.info(f"Loading trial balance file: {file_path}")

        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        suffix = path.suffix.lower()
        if suffix not in EXCEL_ENGINES and suffix != '.csv':
            raise ValueError(f"Unsupported file type '{suffix}'. Please upload an Excel or CSV file.")

        try:
            if suffix == '.csv':
                df = pd.read_csv(file_path, dtype=str)
            else:
                df = pd.read_excel(file_path, sheet_name=0, engine=EXCEL_ENGINES[suffix], dtype=str)
        except Exception as e:
            self.logger.error(f"Error reading {file_path}: {str(e)}")
            raise

        rows, cols = df.shape
        self.logger.info(f"Read {rows} rows x {cols} columns")
        return df

    def detect_column_mapping(self, headers: Iterable) -> ColumnMapping:
        """
        Guess which headers hold the four trial balance fields.

        Each header is assigned to the first field whose keyword it contains;
        a field keeps the first header assigned to it.
        """
        mapping = ColumnMapping()

        for header in headers:
            header_lower = str(header).lower().strip()
            for field_name in MAPPING_FIELDS:
                keywords = self.settings.get_column_keywords(field_name)
                if any(keyword in header_lower for keyword in keywords):
                    if getattr(mapping, field_name) is None:
                        setattr(mapping, field_name, header)
                        self.logger.info(f"Mapped column '{header}' to {field_name}")
                    break

        if not mapping.is_complete():
            missing = [f for f in MAPPING_FIELDS if getattr(mapping, f) is None]
            self.logger.warning(f"Could not detect columns for: {missing}")

        return mapping

    def to_records(self, df: pd.DataFrame, mapping: ColumnMapping) -> List[TrialBalanceRecord]:
        """
        Convert mapped rows to records.

        Rows without an account code are dropped. Balances that cannot be
        parsed are zero-filled.
        """
        if not mapping.is_complete():
            raise ValueError("Please map all required columns")

        missing_cols = [col for col in mapping.as_dict().values() if col not in df.columns]
        if missing_cols:
            raise ValueError(f"Mapped columns not found in file: {missing_cols}")

        records = []
        skipped_rows = 0
        zero_filled = 0

        for _, row in df.iterrows():
            code = row[mapping.account_code]
            if pd.isna(code) or str(code).strip() == '':
                skipped_rows += 1
                continue

            current = parse_amount(row[mapping.current_year_balance])
            prior = parse_amount(row[mapping.prior_year_balance])
            zero_filled += (current is None) + (prior is None)

            description = row[mapping.account_description]
            records.append(build_record(
                code,
                '' if pd.isna(description) else description,
                current if current is not None else 0.0,
                prior if prior is not None else 0.0,
            ))

        if skipped_rows:
            self.logger.warning(f"Skipped {skipped_rows} rows without an account code")
        if zero_filled:
            self.logger.warning(f"{zero_filled} balance values could not be parsed and were treated as 0")

        self.logger.info(f"Successfully loaded {len(records)} trial balance records")
        return records
