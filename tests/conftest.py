"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from src.capture.baseline_store import BaselineStore
from src.models.config import ActionSpec, PathSpec, Settings, SiteConfig, Viewport


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def site_dict() -> dict:
    """Raw, fully-populated site configuration as it would appear in JSON."""
    return {
        "label": "acme",
        "url": "https://example.com/",
        "viewports": [{"label": "desktop", "width": 1280, "height": 720}],
        "paths": [
            {"label": "homepage", "path": "", "shell": True, "selectors": [".hero"]},
        ],
        "actions": [],
        "shell": ["header"],
    }


@pytest.fixture
def site_config(site_dict: dict) -> SiteConfig:
    """One path, one viewport, no actions."""
    return SiteConfig.model_validate(site_dict)


@pytest.fixture
def multi_site_config() -> SiteConfig:
    """Two viewports, two paths, and an action on the second path."""
    return SiteConfig(
        label="acme",
        url="https://example.com/",
        viewports=[
            Viewport(label="desktop", width=1280, height=720),
            Viewport(label="mobile", width=375, height=812),
        ],
        paths=[
            PathSpec(label="homepage", path="", shell=True, selectors=[".hero"]),
            PathSpec(label="about", path="about", shell=False, selectors=["#team"], actions=[0]),
        ],
        actions=[ActionSpec(event="hover", label="hover team", selector="#team", wait=50)],
        shell=["header", "footer"],
    )


@pytest.fixture
def baseline_settings(tmp_path: Path) -> Settings:
    return Settings.localized(tmp_path, baseline_mode=True)


@pytest.fixture
def compare_settings(tmp_path: Path) -> Settings:
    return Settings.localized(tmp_path, baseline_mode=False)


@pytest.fixture
def baseline_store(baseline_settings: Settings) -> BaselineStore:
    return BaselineStore(baseline_settings)


@pytest.fixture
def compare_store(compare_settings: Settings) -> BaselineStore:
    return BaselineStore(compare_settings)
