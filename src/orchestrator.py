"""Pipeline orchestrator: coordinates capture, compare, and review output stages."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field

from src.capture.baseline_store import BaselineStore
from src.capture.capture_orchestrator import CaptureOrchestrator
from src.diff.comparator import ImageComparator
from src.diff.diff_engine import analyze
from src.errors import ConfigurationError
from src.models.capture import Diff, RunResult
from src.models.config import Settings, SiteConfig, is_valid_config
from src.reporter.output import extract_diff_paths
from src.reporter.reporter import Reporter

logger = logging.getLogger(__name__)


class PipelineOutcome(BaseModel):
    """What a pipeline run produced, for the CLI summary."""

    website: str
    baseline_mode: bool
    run_result: RunResult
    diffs: list[Diff] = Field(default_factory=list)
    reviewed_paths: int = 0
    reports: dict[str, str] = Field(default_factory=dict)
    duration: float = 0.0

    @property
    def succeeded(self) -> bool:
        return not self.run_result.failed


class Orchestrator:
    """Coordinates the full visual regression pipeline for one site."""

    def __init__(
        self,
        config: Any,
        settings: Settings,
        renderer_factory: Callable[[], Any] | None = None,
        comparator: ImageComparator | None = None,
        on_progress: Optional[Callable[[str], None]] = None,
    ):
        if not is_valid_config(config):
            raise ConfigurationError("Invalid website configuration.")
        self.config: SiteConfig = (
            config if isinstance(config, SiteConfig) else SiteConfig.model_validate(config)
        )
        self.settings = settings
        self.store = BaselineStore(settings)
        self.renderer_factory = renderer_factory
        self.comparator = comparator or ImageComparator(tolerance=settings.comparison_tolerance)
        self.on_progress = on_progress

    def run(self) -> PipelineOutcome:
        """Execute the complete initialize → capture → compare → review pipeline."""
        return asyncio.run(self.run_async())

    async def run_async(self) -> PipelineOutcome:
        start = time.time()
        site = self.config.label
        logger.info("=== Starting visual regression run for %s (%s) ===",
                    site, "baseline" if self.settings.baseline_mode else "comparison")

        # Stage 1: Initialize filesystem
        logger.info("--- Stage 1: Initialize filesystem ---")
        self.store.initialize(self.config)

        # Stage 2: Capture
        logger.info("--- Stage 2: Crawl and capture \"%s\" ---", site)
        stage_start = time.time()
        run_result = await self._capture()
        outcome = PipelineOutcome(
            website=site, baseline_mode=self.settings.baseline_mode, run_result=run_result,
        )
        logger.info("--- Stage 2 complete: %d captures, %d warnings, %d errors in %.1fs ---",
                    len(run_result.analysis), len(run_result.warnings),
                    len(run_result.errors), time.time() - stage_start)

        if run_result.errors:
            for error in run_result.errors:
                logger.error("%s", error)
            return self._finish(outcome, start)
        for warning in run_result.warnings:
            logger.warning("WARNING: %s [%s]", warning.message, warning.path)

        if self.settings.baseline_mode:
            logger.info("Baseline images established for %s", site)
            return self._finish(outcome, start)

        # Stage 3: Compare
        logger.info("--- Stage 3: Compare captures to references ---")
        if not run_result.analysis:
            logger.warning("No element captures were taken; nothing to compare.")
            return self._finish(outcome, start)
        outcome.diffs = await analyze(run_result.analysis, self.store, self.comparator)

        if not outcome.diffs:
            logger.info("No differences found.")
            return self._finish(outcome, start)

        # Stage 4: Review output
        logger.info("--- Stage 4: Differences found, generating review output ---")
        reporter = Reporter(self.settings, self.store)
        outcome.reports = reporter.generate_reports(site, run_result, outcome.diffs)
        outcome.reviewed_paths = len(extract_diff_paths(outcome.diffs))
        return self._finish(outcome, start)

    async def _capture(self) -> RunResult:
        capture = CaptureOrchestrator(
            self.config,
            self.settings,
            store=self.store,
            renderer_factory=self.renderer_factory,
            on_progress=self.on_progress,
        )
        return await capture.run()

    @staticmethod
    def _finish(outcome: PipelineOutcome, start: float) -> PipelineOutcome:
        outcome.duration = round(time.time() - start, 2)
        logger.info("=== Pipeline complete in %.1fs ===", outcome.duration)
        return outcome
