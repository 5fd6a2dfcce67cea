"""Selector to filename encoding and event-capture detection."""

from __future__ import annotations

import re

from src.models.config import EVENT_KINDS

_WHITESPACE_RE = re.compile(r"\s")

_TOKENS = (
    ("#", "_vID_"),
    (".", "_vCLS_"),
    ("/", "_vSL_"),
)


def encode_selector(selector: str) -> str:
    """Return the image filename (without extension) for a CSS selector.

    ``header nav.main`` becomes ``header_vSP_nav_vCLS_main``.
    """
    name = _WHITESPACE_RE.sub("_vSP_", selector)
    for char, token in _TOKENS:
        name = name.replace(char, token)
    return name


def selector_filename(selector: str) -> str:
    return f"{encode_selector(selector)}.png"


def is_event_capture(image: str) -> bool:
    """True when the image was captured from an event-tagged selector (``a:hover``).

    Plain substring match: a selector whose own text contains ``:focus`` etc.
    is treated the same way.
    """
    return any(f":{event}" in image for event in EVENT_KINDS)
