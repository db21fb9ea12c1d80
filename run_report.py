"""
Intervention report runner
Renders a report record stored as JSON to a PDF file, optionally e-mails it.

Usage: python run_report.py <record.json> [-o report.pdf] [--send]
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from pydantic import ValidationError

from piscineo.config import LOG_LEVEL
from piscineo.domain.interventions.schemas import ReportRecord
from piscineo.domain.interventions.service import InterventionReportService, build_report_filename

logger = logging.getLogger(__name__)


def load_record(record_path: Path) -> ReportRecord:
    """Read and validate a report record JSON file"""
    with open(record_path, "r", encoding="utf-8") as f:
        return ReportRecord.model_validate(json.load(f))


def run_report(record_path: str, output_path: Optional[str] = None, send: bool = False) -> int:
    """Render (and optionally send) one report, returns a process exit code"""
    path = Path(record_path)
    if not path.exists():
        logger.error(f"Record file not found: {path}")
        return 1

    try:
        record = load_record(path)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error(f"❌ Invalid report record {path}: {e}")
        return 1

    service = InterventionReportService()
    pdf_bytes = service.render(record)

    output = Path(output_path) if output_path else path.with_name(build_report_filename(record))
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(pdf_bytes)
    logger.info(f"✅ Report written to {output}")

    if send:
        if not asyncio.run(service.send(record, pdf_bytes)):
            logger.error(f"❌ Report {record.id} could not be e-mailed")
            return 2

    return 0


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    parser = argparse.ArgumentParser(description="Render an intervention report PDF")
    parser.add_argument("record", help="Path to the report record JSON file")
    parser.add_argument("-o", "--output", help="Output PDF path")
    parser.add_argument("--send", action="store_true", help="E-mail the report to the client")
    args = parser.parse_args()

    try:
        sys.exit(run_report(args.record, args.output, send=args.send))
    except Exception as e:
        logger.error(f"❌ Report generation failed: {e}")
        sys.exit(1)
