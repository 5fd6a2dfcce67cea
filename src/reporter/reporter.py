"""Report generation orchestration."""

from __future__ import annotations

import logging

from src.capture.baseline_store import BaselineStore
from src.models.capture import Diff, RunResult
from src.models.config import Settings

from .json_report import generate_json_report
from .output import generate_html, prepare_output

logger = logging.getLogger(__name__)


class Reporter:
    """Builds the review output for a comparison run."""

    def __init__(self, settings: Settings, store: BaselineStore):
        self.settings = settings
        self.store = store

    def generate_reports(self, website: str, run_result: RunResult, diffs: list[Diff]) -> dict[str, str]:
        """Generate all configured report formats. Returns format -> file path."""
        grouped = prepare_output(diffs, self.store)
        generated = {}

        if "html" in self.settings.report_formats:
            logger.debug("Generating HTML review page...")
            path = self.store.save_output(generate_html(grouped, website), website)
            generated["html"] = str(path)
            logger.info("HTML report: %s", path)

        if "json" in self.settings.report_formats:
            path = self.settings.output_dir / website / "report.json"
            logger.debug("Generating JSON report...")
            generate_json_report(website, run_result, diffs, grouped, path)
            generated["json"] = str(path)
            logger.info("JSON report: %s", path)

        return generated
