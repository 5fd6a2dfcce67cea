"""Baseline store: the reference and candidate capture trees on disk."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any

from src.errors import BaselineInitializationError, ReviewOutputError
from src.models.capture import FULLPAGE_IMAGE, FULLPAGE_REFERENCE_IMAGE
from src.models.config import Settings, SiteConfig

logger = logging.getLogger(__name__)


class BaselineStore:
    """Manages the two parallel capture trees and the review output directory.

    Layout (relative to ``settings.app_dir``)::

        output/captures/reference/<site>/<path>/<viewport>/
        output/captures/new/<site>/<path>/<viewport>/
        output/results/<site>/
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def baseline_mode(self) -> bool:
        return self.settings.baseline_mode

    def initialize(self, config: Any) -> None:
        """Create every (site, path, viewport) directory in both trees.

        The tree about to be written is emptied first so stale images never
        leak into this run: the reference tree in baseline mode, the
        candidate tree and the site's review output otherwise.
        """
        if not isinstance(config, SiteConfig):
            raise BaselineInitializationError(
                f"Cannot initialize filesystem for {type(config).__name__}: not a site configuration"
            )

        site = config.label
        cleared = self.settings.reference_dir if self.baseline_mode else self.settings.capture_dir
        current: Path = self.settings.app_dir
        try:
            current = self.settings.output_dir / site
            current.mkdir(parents=True, exist_ok=True)
            if not self.baseline_mode:
                self.empty_directory(current)

            current = cleared / site
            if current.exists():
                logger.debug("Clearing %s", current)
                self.empty_directory(current)

            for tree in (self.settings.reference_dir, self.settings.capture_dir):
                for path in config.paths:
                    for viewport in config.viewports:
                        current = tree / site / path.label / viewport.label
                        current.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BaselineInitializationError(
                f"Failed to initialize {current}: {e}", path=current, cause=e,
            ) from e

        logger.debug("Initialized capture directories for %s (%d paths x %d viewports)",
                     site, len(config.paths), len(config.viewports))

    def reference_exists(self, website: str, path: str, viewport: str) -> bool:
        """True iff the reference directory for the triple holds at least one file."""
        directory = self.settings.reference_dir / website / path / viewport
        if not directory.is_dir():
            return False
        return any(directory.iterdir())

    def target_dir(self, website: str, path: str, viewport: str) -> Path:
        """Directory new captures are written to for the current mode."""
        root = self.settings.reference_dir if self.baseline_mode else self.settings.capture_dir
        return root / website / path / viewport

    def reference_path(self, relative: str) -> Path:
        return self.settings.reference_dir / relative

    def capture_path(self, relative: str) -> Path:
        return self.settings.capture_dir / relative

    @staticmethod
    def empty_directory(directory: Path) -> None:
        """Remove everything inside ``directory``, keeping the directory itself."""
        for child in Path(directory).iterdir():
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()

    def copy_to_output(self, prefix: str) -> tuple[Path, Path]:
        """Copy the fullpage pair for ``site/path/viewport/`` into the review directory.

        Returns (candidate copy, reference copy). Both are copied or the call
        raises ``ReviewOutputError``.
        """
        reference = self.settings.reference_dir / prefix / FULLPAGE_IMAGE
        capture = self.settings.capture_dir / prefix / FULLPAGE_IMAGE
        dest_dir = self.settings.output_dir / prefix
        capture_dest = dest_dir / FULLPAGE_IMAGE
        reference_dest = dest_dir / FULLPAGE_REFERENCE_IMAGE

        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(reference, reference_dest)
            shutil.copy2(capture, capture_dest)
        except OSError as e:
            # never leave half a pair behind
            for partial in (capture_dest, reference_dest):
                partial.unlink(missing_ok=True)
            raise ReviewOutputError(f"Could not copy fullpage images for {prefix}: {e}") from e

        if not capture_dest.exists() or not reference_dest.exists():
            raise ReviewOutputError(f"Fullpage images for {prefix} are incomplete")
        logger.debug("Copied fullpage pair for %s to %s", prefix, dest_dir)
        return capture_dest, reference_dest

    def save_output(self, html: str, website: str) -> Path:
        """Write the review page to ``output/results/<site>/output.html``."""
        path = self.settings.output_dir / website / "output.html"
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(html)
        return path
