"""Test doubles shared across the capture, diff and pipeline tests."""

from __future__ import annotations

import asyncio
from pathlib import Path
from types import SimpleNamespace
from typing import Iterable

from PIL import Image

from src.errors import (
    CaptureError,
    InteractionError,
    NavigationError,
    SelectorNotFoundError,
    SelectorNotVisibleError,
)

WHITE = (255, 255, 255)
RED = (255, 0, 0)


def write_png(path: Path, color: tuple[int, int, int] = WHITE, size: tuple[int, int] = (16, 16)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path)
    return path


class FakeRenderer:
    """Stands in for PlaywrightRenderer; writes solid-colour PNGs instead of screenshots.

    Selectors listed in ``missing``/``hidden``/``broken`` fail the way the
    real renderer classifies them; URLs in ``unreachable`` fail navigation;
    actions targeting ``failing_actions`` raise InteractionError.
    """

    def __init__(
        self,
        *,
        unreachable: Iterable[str] = (),
        missing: Iterable[str] = (),
        hidden: Iterable[str] = (),
        broken: Iterable[str] = (),
        failing_actions: Iterable[str] = (),
        colors: dict[str, tuple[int, int, int]] | None = None,
        action_delays: dict[str, float] | None = None,
    ):
        self.unreachable = set(unreachable)
        self.missing = set(missing)
        self.hidden = set(hidden)
        self.broken = set(broken)
        self.failing_actions = set(failing_actions)
        self.colors = colors or {}
        self.action_delays = action_delays or {}

        self.calls: list[tuple] = []
        self.opened: list[tuple[str, bool]] = []
        self.closed_surfaces = 0
        self.entered = False
        self.exited = False
        self.settled_actions: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def __aenter__(self) -> "FakeRenderer":
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.exited = True

    async def open_surface(self, viewport, has_touch: bool = False):
        self.opened.append((viewport.label, has_touch))
        return SimpleNamespace(viewport=viewport, url=None)

    async def close_surface(self, page) -> None:
        self.closed_surfaces += 1

    async def navigate(self, page, url: str) -> None:
        self.calls.append(("navigate", url))
        if url in self.unreachable:
            raise NavigationError(f"Page Not Found: {url}")
        page.url = url

    async def perform_interaction(self, page, selector: str, event: str) -> None:
        self.calls.append(("interact", event, selector))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.action_delays.get(selector, 0))
            if selector in self.failing_actions:
                raise InteractionError(f'{event} on "{selector}" failed: element not found')
        finally:
            self.in_flight -= 1
            self.settled_actions.append(selector)

    async def settle(self, page, wait_ms: int) -> None:
        self.calls.append(("settle", wait_ms))

    async def wait_for_element(self, page, selector: str, timeout_ms: int | None = None) -> None:
        self.calls.append(("wait", selector))
        if selector in self.missing:
            raise SelectorNotFoundError(f'Selector "{selector}" is null.')

    async def screenshot_element(self, page, selector: str, dest: Path) -> None:
        self.calls.append(("element", selector, page.viewport.label))
        if selector in self.hidden:
            raise SelectorNotVisibleError(f'Selector "{selector}" is likely not visible.')
        if selector in self.broken:
            raise CaptureError("Target page, context or browser has been closed")
        write_png(dest, self.colors.get(selector, WHITE))

    async def screenshot_full_page(self, page, dest: Path) -> None:
        self.calls.append(("fullpage", page.viewport.label))
        write_png(dest, self.colors.get("fullpage", WHITE), size=(32, 64))

    def calls_of(self, kind: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == kind]
