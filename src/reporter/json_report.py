"""JSON report output."""

from __future__ import annotations

import json
from pathlib import Path

from src.models.capture import Diff, GroupedDiff, RunResult


def generate_json_report(
    website: str,
    run_result: RunResult,
    diffs: list[Diff],
    grouped: list[GroupedDiff],
    output_path: Path,
) -> None:
    """Write a machine-readable JSON report."""
    report = {"website": website, **run_result.model_dump()}
    report["diffs"] = [
        {
            "path": d.path,
            "viewport": d.record.viewport,
            "page": d.record.path,
            "image": d.record.image,
            "obscured": d.obscured,
        }
        for d in diffs
    ]
    report["review"] = [
        {
            "path": g.path,
            "reference": g.reference,
            "capture": g.capture,
            "obscured": g.obscured,
        }
        for g in grouped
    ]

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(report, f, indent=2, default=str)
