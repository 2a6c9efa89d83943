"""
Command-line entry point for trial balance variance analysis.
"""

import argparse
import logging
import sys
from typing import List, Optional

from tb_analysis.analysis.session import AnalysisSession
from tb_analysis.analysis.summary import get_top_variances
from tb_analysis.config.settings import Settings
from tb_analysis.data.loader import TrialBalanceLoader
from tb_analysis.data.validator import RecordValidator
from tb_analysis.reports.excel_generator import ExcelGenerator
from tb_analysis.reports.pdf_generator import PDFGenerator
from tb_analysis.utils.logging_config import setup_logging


def main(input_file: Optional[str] = None, output_file: Optional[str] = None,
         pdf_file: Optional[str] = None, materiality: Optional[float] = None,
         significant: Optional[float] = None, template_file: Optional[str] = None,
         log_level: Optional[str] = None) -> None:
    """
    Run the trial balance analysis pipeline.

    Args:
        input_file: Path to the trial balance upload (.xlsx, .xls or .csv)
        output_file: Path to the Excel report
        pdf_file: Optional path to a PDF report
        materiality: Materiality threshold override (percent)
        significant: Significant threshold override (percent)
        template_file: Write an upload template here instead of analysing
        log_level: Logging level override
    """
    logger = logging.getLogger(__name__)
    try:
        settings = Settings()
        setup_logging(log_level or settings.log_level)
        logger.info("Starting Trial Balance Variance Analysis")

        if template_file:
            ExcelGenerator(settings).generate_template(template_file)
            return

        if not input_file:
            raise ValueError("An input file is required")

        _run_analysis(settings, input_file, output_file or settings.default_output_file,
                      pdf_file, materiality, significant)

        logger.info("Processing completed successfully")

    except KeyboardInterrupt:
        logger.info("Processing interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Error during processing: {str(e)}")
        sys.exit(1)


def _run_analysis(settings: Settings, input_file: str, output_file: str,
                  pdf_file: Optional[str], materiality: Optional[float],
                  significant: Optional[float]) -> None:
    logger = logging.getLogger(__name__)

    records = TrialBalanceLoader(settings).load_records(input_file)

    session = AnalysisSession(settings.get_threshold_config())
    if materiality is not None:
        session.set_materiality_threshold(materiality)
    if significant is not None:
        session.set_significant_threshold(significant)

    if not RecordValidator(settings).validate(records, session.thresholds):
        raise ValueError("Trial balance failed validation")

    session.load(records)
    if session.is_empty:
        logger.warning("No data: the upload contained no trial balance rows")

    summary = session.summary()
    logger.info(
        f"{summary.total_accounts} accounts, {summary.flagged_items} flagged "
        f"({summary.significant_items} significant, {summary.moderate_items} moderate)"
    )
    for record in get_top_variances(session.records, n=5, by='amount'):
        logger.info(f"  {record.account_code} {record.account_description}: "
                    f"{record.variance:,.2f} ({record.variance_percentage:.2f}%)")

    ExcelGenerator(settings).generate_report(
        session.records, output_file, session.notes, session.follow_ups, session.thresholds
    )
    if pdf_file:
        PDFGenerator().generate_report(
            session.records, pdf_file, session.notes, session.follow_ups, summary
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Trial Balance Variance Analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Analyse an upload with default thresholds
  tb-analysis -i trial_balance.xlsx -o analysis.xlsx

  # Custom thresholds and a PDF copy
  tb-analysis -i trial_balance.csv --materiality 5 --significant 20 --pdf analysis.pdf

  # Download the upload template
  tb-analysis --template trial_balance_template.xlsx
        """
    )

    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument("-i", "--input", help="Trial balance file (.xlsx, .xls or .csv)")
    input_group.add_argument("--template", help="Write an upload template to this path")

    parser.add_argument("-o", "--output", help="Excel report path")
    parser.add_argument("--pdf", help="Optional PDF report path")
    parser.add_argument("--materiality", type=float, help="Materiality threshold in percent (default: 10)")
    parser.add_argument("--significant", type=float, help="Significant threshold in percent (default: 25)")
    parser.add_argument(
        "--log-level",
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help="Logging level (default: LOG_LEVEL or INFO)"
    )
    return parser


def cli(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    main(
        input_file=args.input,
        output_file=args.output,
        pdf_file=args.pdf,
        materiality=args.materiality,
        significant=args.significant,
        template_file=args.template,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    cli()
