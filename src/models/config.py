"""Configuration models for the visual regression pipeline."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationError, model_validator

from src.errors import ConfigurationError

EventKind = Literal["hover", "focus", "tap", "click"]

EVENT_KINDS: tuple[str, ...] = ("hover", "focus", "tap", "click")


def _path_segment(value: str) -> str:
    """Labels name capture directories, so they must be a single plain path segment."""
    if value in (".", "..") or "/" in value or "\\" in value:
        raise ValueError(f"label {value!r} cannot be used as a directory name")
    return value


Label = Annotated[str, Field(min_length=1), AfterValidator(_path_segment)]


def _number(items: Any) -> Any:
    """Assign sequential IDs to a raw list of config entries.

    Entries may be dicts, already-built models or (for selectors) bare strings.
    Anything else is passed through untouched so pydantic reports it.
    """
    if not isinstance(items, (list, tuple)):
        return items
    numbered = []
    for index, item in enumerate(items):
        if isinstance(item, BaseModel):
            item = item.model_dump()
        elif isinstance(item, str):
            item = {"value": item}
        elif isinstance(item, dict):
            item = dict(item)
        else:
            numbered.append(item)
            continue
        item["id"] = index
        numbered.append(item)
    return numbered


class Selector(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str = Field(min_length=1)
    id: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"value": data}
        return data


class Viewport(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: Label
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    id: Optional[int] = None


class ActionSpec(BaseModel):
    """A scripted interaction performed before anything on the page is captured."""

    model_config = ConfigDict(frozen=True)

    event: EventKind
    label: str
    selector: str = Field(min_length=1)
    wait: int = Field(default=200, ge=0)  # ms to let the page settle afterwards
    id: Optional[int] = None


class PathSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: Label
    path: str = ""
    shell: bool = True
    selectors: list[Selector] = Field(default_factory=list)
    actions: list[int] = Field(default_factory=list)  # ActionSpec IDs
    id: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _number_selectors(cls, data: Any) -> Any:
        if isinstance(data, dict) and "selectors" in data:
            data = dict(data)
            data["selectors"] = _number(data["selectors"])
        return data


class SiteConfig(BaseModel):
    """One site under test.

    IDs on viewports, paths, actions and shell selectors are assigned once,
    in list order, while the model is built. The model is frozen afterwards.
    """

    model_config = ConfigDict(frozen=True)

    label: Label
    url: str = Field(min_length=1)
    viewports: list[Viewport] = Field(min_length=1)
    paths: list[PathSpec] = Field(min_length=1)
    actions: list[ActionSpec] = Field(default_factory=list)
    shell: list[Selector]

    @model_validator(mode="before")
    @classmethod
    def _assign_ids(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in ("viewports", "paths", "actions", "shell"):
            if key in data:
                data[key] = _number(data[key])
        return data

    @model_validator(mode="after")
    def _check_unique_labels(self) -> "SiteConfig":
        for kind, items in (("viewport", self.viewports), ("path", self.paths)):
            labels = [item.label for item in items]
            duplicates = sorted({label for label in labels if labels.count(label) > 1})
            if duplicates:
                raise ValueError(f"Duplicate {kind} label(s): {duplicates}")
        return self

    @model_validator(mode="after")
    def _check_action_refs(self) -> "SiteConfig":
        known = {a.id for a in self.actions}
        for path in self.paths:
            missing = [ref for ref in path.actions if ref not in known]
            if missing:
                raise ValueError(
                    f"Path '{path.label}' references undefined action id(s): {missing}"
                )
        return self

    @property
    def uses_touch(self) -> bool:
        return any(a.event == "tap" for a in self.actions)

    def page_url(self, path: PathSpec) -> str:
        return f"{self.url}{path.path}"

    def actions_for(self, path: PathSpec) -> list[ActionSpec]:
        """Resolve a path's action IDs, in the order the path declares them."""
        by_id = {a.id: a for a in self.actions}
        return [by_id[ref] for ref in path.actions if ref in by_id]

    @classmethod
    def load(cls, path: str | Path) -> "SiteConfig":
        """Load a site config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")
        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Config file {path} is not valid JSON: {e}") from e
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid website configuration in {path}:\n{e}") from e

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(exclude_none=True), f, indent=2)


def is_valid_config(website: Any) -> bool:
    """Return True if ``website`` describes a usable site configuration."""
    if isinstance(website, SiteConfig):
        return True
    if not isinstance(website, dict):
        return False
    try:
        SiteConfig.model_validate(website)
    except ValidationError:
        return False
    return True


def default_site_config() -> SiteConfig:
    """Example configuration written by ``visreg init``."""
    return SiteConfig(
        label="google",
        url="https://about.google/",
        viewports=[
            Viewport(label="desktop", width=1920, height=1080),
            Viewport(label="mobile", width=375, height=812),
        ],
        paths=[
            PathSpec(
                label="homepage",
                path="intl/en/",
                shell=True,
                selectors=[".home-hero-copy", "#carousel-placeholder"],
                actions=[0],
            ),
        ],
        actions=[
            ActionSpec(event="hover", label="hover carousel", selector=".carousel-placeholder"),
        ],
        shell=["header", "footer"],
    )


class Settings(BaseModel):
    """Runtime settings: where artifacts live and how the run behaves."""

    app_dir: Path = Field(default_factory=Path.cwd)
    baseline_mode: bool = False
    headless: bool = True
    selector_timeout_ms: int = 10000
    # Stop the whole run on the first hard error. When False, only the
    # remaining paths of the current viewport are skipped.
    abort_on_error: bool = True
    comparison_tolerance: int = 0
    report_formats: list[str] = Field(default_factory=lambda: ["html", "json"])

    @classmethod
    def localized(cls, root: str | Path, **overrides: Any) -> "Settings":
        """Settings rooted at ``root`` instead of the working directory."""
        return cls(app_dir=Path(root), **overrides)

    @property
    def shots_dir(self) -> Path:
        return self.app_dir / "output" / "captures"

    @property
    def capture_dir(self) -> Path:
        return self.shots_dir / "new"

    @property
    def reference_dir(self) -> Path:
        return self.shots_dir / "reference"

    @property
    def output_dir(self) -> Path:
        return self.app_dir / "output" / "results"
