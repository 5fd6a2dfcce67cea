"""Diff engine: compares every candidate capture against its reference."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from src.capture.baseline_store import BaselineStore
from src.capture.naming import is_event_capture
from src.errors import DiffInputError
from src.models.capture import CaptureRecord, Diff

from .comparator import ImageComparator

logger = logging.getLogger(__name__)


def _check_input(analysis: Any) -> list[CaptureRecord]:
    if not isinstance(analysis, (list, tuple)):
        raise DiffInputError(f"Expected a list of captures, got {type(analysis).__name__}")
    if not analysis:
        raise DiffInputError("Nothing to compare: the capture list is empty")
    bad = [item for item in analysis if not isinstance(item, CaptureRecord)]
    if bad:
        raise DiffInputError(f"{len(bad)} item(s) in the capture list are not captures")
    return list(analysis)


async def analyze(
    analysis: Any,
    store: BaselineStore,
    comparator: ImageComparator | None = None,
) -> list[Diff]:
    """Compare each captured image with its reference and return the differences.

    All comparisons run concurrently and are awaited together. A comparison
    that cannot read either image raises ``ComparisonError``; diffs are only
    returned when every comparison completed. Order follows ``analysis``.
    """
    records = _check_input(analysis)
    comparator = comparator or ImageComparator()
    logger.info("Comparing %d captures to references...", len(records))

    async def _compare(record: CaptureRecord) -> Diff | None:
        relative = record.relative_path
        equal = await asyncio.to_thread(
            comparator.compare, store.capture_path(relative), store.reference_path(relative),
        )
        if equal:
            return None
        logger.debug("Difference: %s", relative)
        return Diff(record=record, path=relative, obscured=is_event_capture(record.image))

    outcomes = await asyncio.gather(*(_compare(r) for r in records), return_exceptions=True)
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    diffs = [d for d in outcomes if d is not None]
    logger.info("%d of %d captures differ from their references", len(diffs), len(records))
    return diffs
