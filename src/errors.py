"""Exception hierarchy for the visual regression pipeline."""

from __future__ import annotations

from pathlib import Path


class VisualRegressionError(RuntimeError):
    """Base class for every failure the pipeline raises on purpose."""


class ConfigurationError(VisualRegressionError):
    """Raised when a site configuration is missing fields or cannot be loaded."""


class BaselineInitializationError(VisualRegressionError):
    """Raised when the capture directory trees cannot be prepared."""

    def __init__(self, message: str, path: Path | str | None = None, cause: Exception | None = None):
        super().__init__(message)
        self.path = str(path) if path is not None else None
        self.cause = cause


class MissingBaselineError(VisualRegressionError):
    """Raised when a comparison run finds no reference images for a path."""


class CaptureError(VisualRegressionError):
    """Unclassified capture failure. Treated as systemic."""


class NavigationError(CaptureError):
    """The renderer could not load the target URL."""


class SelectorNotFoundError(CaptureError):
    """Timed out waiting for a selector to appear."""


class SelectorNotVisibleError(CaptureError):
    """The selector matched an element that cannot be screenshotted."""


class InteractionError(CaptureError):
    """A configured hover/focus/tap/click could not be performed."""


class ComparisonError(VisualRegressionError):
    """An image pair could not be read for comparison."""


class DiffInputError(VisualRegressionError):
    """The diff engine was handed an empty or malformed capture list."""


class ReviewOutputError(VisualRegressionError):
    """A full-page image pair could not be copied into the review directory."""
