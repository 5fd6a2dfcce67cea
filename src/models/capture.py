"""Run result and diff data structures produced by capture and comparison."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

FULLPAGE_IMAGE = "fullpage.png"
FULLPAGE_REFERENCE_IMAGE = "fullpage_ref.png"


class CaptureRecord(BaseModel):
    """One successfully captured element image."""

    model_config = ConfigDict(frozen=True)

    website: str
    path: str
    viewport: str
    image: str  # filename inside the (website, path, viewport) directory

    @property
    def relative_path(self) -> str:
        return f"{self.website}/{self.path}/{self.viewport}/{self.image}"

    @property
    def prefix(self) -> str:
        return f"{self.website}/{self.path}/{self.viewport}/"


class CaptureWarning(BaseModel):
    message: str
    path: str  # "<viewport>: <path>"


class RunResult(BaseModel):
    """Outcome of one crawl. Created fresh for every capture run."""

    warnings: list[CaptureWarning] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    analysis: list[CaptureRecord] = Field(default_factory=list)

    @property
    def failed(self) -> bool:
        return bool(self.errors)


class Diff(BaseModel):
    model_config = ConfigDict(frozen=True)

    record: CaptureRecord
    path: str
    obscured: bool = False  # taken as an interaction target, may not show in fullpage


class GroupedDiff(BaseModel):
    """One path-level review unit: the fullpage pair for a (site, path, viewport)."""

    model_config = ConfigDict(frozen=True)

    path: str  # "<site>/<path>/<viewport>/"
    obscured: bool = False

    @property
    def reference(self) -> str:
        return f"{self.path}{FULLPAGE_REFERENCE_IMAGE}"

    @property
    def capture(self) -> str:
        return f"{self.path}{FULLPAGE_IMAGE}"
