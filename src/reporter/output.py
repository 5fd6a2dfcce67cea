"""Review output: groups diffs by page and renders the comparison page."""

from __future__ import annotations

import html
import logging
import re
from datetime import date
from typing import Mapping, Optional
from urllib.parse import quote

from src.capture.baseline_store import BaselineStore
from src.models.capture import Diff, GroupedDiff

from .templates import BUTTON_TEMPLATE, OBSCURE_WARNING_TEMPLATE, PAGE_TEMPLATE, SWITCHER_TEMPLATE

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


def render(template: str, values: Mapping[str, object]) -> str:
    """Replace ``{key}`` placeholders with values. Unknown placeholders are left alone.

    Substitution is a single pass, so a value containing ``{key}`` text is
    never expanded again.
    """
    def _replacer(match: re.Match) -> str:
        key = match.group(1)
        if key in values:
            return str(values[key])
        return match.group(0)

    return _PLACEHOLDER_RE.sub(_replacer, template)


def extract_diff_paths(diffs: list[Diff]) -> list[str]:
    """Unique ``site/path/viewport/`` prefixes, in the order first seen.

    A page's review artifact is its fullpage shot, so every selector-level
    diff on the same page collapses to one prefix.
    """
    paths: list[str] = []
    for diff in diffs:
        prefix = diff.path.removesuffix(diff.record.image)
        if prefix not in paths:
            paths.append(prefix)
    return paths


def has_obscured_captures(diffs: list[Diff]) -> bool:
    return any(d.obscured for d in diffs)


def group_diffs(diffs: list[Diff]) -> list[GroupedDiff]:
    """One GroupedDiff per page; obscured if any of its diffs is."""
    grouped = []
    for prefix in extract_diff_paths(diffs):
        members = [d for d in diffs if d.path.removesuffix(d.record.image) == prefix]
        grouped.append(GroupedDiff(path=prefix, obscured=has_obscured_captures(members)))
    return grouped


def prepare_output(diffs: list[Diff], store: BaselineStore) -> list[GroupedDiff]:
    """Group diffs and copy each page's fullpage pair into the review directory.

    Raises ``ReviewOutputError`` if either image of a pair is missing.
    """
    grouped = group_diffs(diffs)
    for entry in grouped:
        store.copy_to_output(entry.path)
    logger.debug("Prepared %d review entries from %d diffs", len(grouped), len(diffs))
    return grouped


def _strip_site(path: str, website: str) -> str:
    return path.removeprefix(f"{website}/")


def generate_html(
    diffs: list[GroupedDiff],
    website: str,
    generated_on: Optional[date] = None,
) -> str:
    """Render the review page.

    One tab per page (the first one active) and one switcher panel per page
    toggling between the new capture and the reference. Image paths are
    relative to ``output/results/<site>/``.
    """
    generated_on = generated_on or date.today()
    title = f"Test Output: {generated_on.strftime('%a %b %d %Y')}"

    tabs = []
    switchers = []
    for index, diff in enumerate(diffs):
        activate = "active" if index == 0 else ""
        path = html.escape(_strip_site(diff.path, website))
        tabs.append(render(BUTTON_TEMPLATE, {"path": path, "activate": activate}))
        switchers.append(render(SWITCHER_TEMPLATE, {
            "path": path,
            "activate": activate,
            "reference": html.escape(quote(_strip_site(diff.reference, website))),
            "new": html.escape(quote(_strip_site(diff.capture, website))),
            "obscure_warning": OBSCURE_WARNING_TEMPLATE if diff.obscured else "",
        }))

    summary = f"{html.escape(website)} &middot; {len(diffs)} page(s) with differences"
    return render(PAGE_TEMPLATE, {
        "title": html.escape(title),
        "summary": summary,
        "tabs": "".join(tabs),
        "switchers": "".join(switchers),
    })
