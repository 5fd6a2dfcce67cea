"""Capture orchestrator: walks viewports × paths × selectors and records the outcome."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Optional

from src.errors import (
    CaptureError,
    MissingBaselineError,
    NavigationError,
    SelectorNotFoundError,
    SelectorNotVisibleError,
)
from src.models.capture import FULLPAGE_IMAGE, CaptureRecord, CaptureWarning, RunResult
from src.models.config import ActionSpec, PathSpec, Settings, SiteConfig, Viewport

from .baseline_store import BaselineStore
from .naming import selector_filename
from .renderer import PlaywrightRenderer

logger = logging.getLogger(__name__)


class _ViewportAborted(Exception):
    """Unwinds the path loop of the current viewport."""


class _RunAborted(Exception):
    """Unwinds every remaining viewport and path."""


class CaptureOrchestrator:
    """Crawls a site and captures shell, page and fullpage screenshots.

    Every call to :meth:`run` starts from a fresh :class:`RunResult`, which
    is passed explicitly to each step and returned at the end. A recorded
    error stops the run (or, with ``settings.abort_on_error`` off, the
    current viewport); warnings never stop anything.
    """

    def __init__(
        self,
        config: SiteConfig,
        settings: Settings,
        store: BaselineStore | None = None,
        renderer_factory: Callable[[], Any] | None = None,
        on_progress: Optional[Callable[[str], None]] = None,
    ):
        self.config = config
        self.settings = settings
        self.store = store or BaselineStore(settings)
        self.renderer_factory = renderer_factory or (
            lambda: PlaywrightRenderer(
                headless=settings.headless, timeout_ms=settings.selector_timeout_ms,
            )
        )
        self.on_progress = on_progress

    def _progress(self, message: str) -> None:
        logger.info(message)
        if self.on_progress:
            self.on_progress(message)

    async def run(self) -> RunResult:
        """Capture every configured viewport and path."""
        result = RunResult()
        site = self.config
        start = time.time()
        mode = "baseline" if self.settings.baseline_mode else "comparison"
        logger.info("Starting %s capture of %s (%d viewports, %d paths)",
                    mode, site.label, len(site.viewports), len(site.paths))

        try:
            async with self.renderer_factory() as renderer:
                for viewport in site.viewports:
                    try:
                        await self._capture_viewport(renderer, viewport, result)
                    except _ViewportAborted:
                        logger.warning("Skipping remaining paths for viewport %s", viewport.label)
        except _RunAborted:
            logger.error("Capture aborted: %s", result.errors[-1])
        except CaptureError as e:
            # renderer could not be started or torn down
            result.errors.append(str(e))
            logger.error("Capture failed: %s", e)

        if not result.errors:
            logger.info("Capturing complete: %d captures, %d warnings (%.1fs)",
                        len(result.analysis), len(result.warnings), time.time() - start)
        return result

    def _fail(self, result: RunResult, message: str) -> None:
        """Record a hard error and unwind according to the abort policy."""
        result.errors.append(message)
        if self.settings.abort_on_error:
            raise _RunAborted(message)
        raise _ViewportAborted(message)

    async def _capture_viewport(self, renderer, viewport: Viewport, result: RunResult) -> None:
        site = self.config
        try:
            page = await renderer.open_surface(viewport, has_touch=site.uses_touch)
        except Exception as e:
            self._fail(result, f"Could not open a page for viewport {viewport.label}: {e}")
        self._progress(f"Analyzing {site.label} [{viewport.label}]")
        try:
            for path in site.paths:
                await self._capture_path(renderer, page, viewport, path, result)
        finally:
            await renderer.close_surface(page)

    async def _capture_path(
        self, renderer, page, viewport: Viewport, path: PathSpec, result: RunResult,
    ) -> None:
        site = self.config

        try:
            self.confirm_baselines(path, viewport)
        except MissingBaselineError as e:
            self._fail(result, str(e))

        url = site.page_url(path)
        self._progress(f" -| Opening {url}")
        try:
            await renderer.navigate(page, url)
        except NavigationError as e:
            self._fail(result, str(e))
        except Exception as e:
            self._fail(result, f"Page Not Found: {url} ({e})")

        logger.debug("  Checking for pre-screenshot events (%d)", len(path.actions))
        result.warnings.extend(
            await self.trigger_actions(renderer, page, site.actions_for(path), viewport, path)
        )

        captured: set[str] = set()
        if path.shell and site.shell:
            logger.debug("  Capturing shell elements...")
            for selector in site.shell:
                captured.add(selector.value)
                await self.capture_selector(renderer, page, selector.value, viewport, path, result)

        page_selectors = [v for v in dict.fromkeys(s.value for s in path.selectors) if v not in captured]
        if page_selectors:
            logger.debug("  Capturing page elements...")
            for value in page_selectors:
                await self.capture_selector(renderer, page, value, viewport, path, result)

        await self.capture_fullpage(renderer, page, viewport, path, result)

    def confirm_baselines(self, path: PathSpec, viewport: Viewport) -> None:
        """Raise MissingBaselineError if a comparison run has nothing to compare against."""
        if self.settings.baseline_mode:
            return
        if not self.store.reference_exists(self.config.label, path.label, viewport.label):
            raise MissingBaselineError(
                f"Path {path.label} has no reference images. Please re-establish baseline images."
            )

    async def trigger_actions(
        self,
        renderer,
        page,
        actions: list[ActionSpec],
        viewport: Viewport,
        path: PathSpec,
    ) -> list[CaptureWarning]:
        """Run every action concurrently and return one warning per failed action.

        Returns only after all actions have settled.
        """
        if not actions:
            return []

        async def _perform(action: ActionSpec) -> CaptureWarning | None:
            try:
                await renderer.perform_interaction(page, action.selector, action.event)
                await renderer.settle(page, action.wait)
            except Exception as e:
                logger.debug("  Action '%s' failed: %s", action.label, e)
                return CaptureWarning(
                    message=f"Action \"{action.label}\" ({action.event} {action.selector}) failed: {e}",
                    path=f"{viewport.label}: {path.label}",
                )
            logger.debug("  Action '%s' performed", action.label)
            return None

        outcomes = await asyncio.gather(*(_perform(a) for a in actions))
        return [w for w in outcomes if w is not None]

    async def capture_selector(
        self,
        renderer,
        page,
        selector: str,
        viewport: Viewport,
        path: PathSpec,
        result: RunResult,
    ) -> bool:
        """Screenshot one element. Returns True when a capture was recorded."""
        site = self.config
        where = f"{viewport.label}: {path.label}"
        dest = self.store.target_dir(site.label, path.label, viewport.label) / selector_filename(selector)
        try:
            await renderer.wait_for_element(page, selector, self.settings.selector_timeout_ms)
            await renderer.screenshot_element(page, selector, dest)
        except SelectorNotFoundError:
            result.warnings.append(CaptureWarning(message=f'Selector "{selector}" is null.', path=where))
            return False
        except SelectorNotVisibleError:
            result.warnings.append(
                CaptureWarning(message=f'Selector "{selector}" is likely not visible.', path=where)
            )
            return False
        except CaptureError as e:
            self._fail(result, str(e))
        except Exception as e:
            self._fail(result, f"{type(e).__name__}: {e}")

        result.analysis.append(CaptureRecord(
            website=site.label,
            path=path.label,
            viewport=viewport.label,
            image=dest.name,
        ))
        logger.debug("  Captured %s -> %s", selector, dest.name)
        return True

    async def capture_fullpage(
        self, renderer, page, viewport: Viewport, path: PathSpec, result: RunResult,
    ) -> None:
        dest = self.store.target_dir(self.config.label, path.label, viewport.label) / FULLPAGE_IMAGE
        try:
            await renderer.screenshot_full_page(page, dest)
        except Exception as e:
            self._fail(result, f"Fullpage capture of {path.label} [{viewport.label}] failed: {e}")
        logger.debug("  Captured fullpage -> %s", dest)
