"""Pydantic models for check and scan reports."""

from pathlib import Path

from pydantic import BaseModel, Field

from tabdirective.constants import IndentStyle


class SettingsReport(BaseModel):
    """Effective settings as reported to the user."""

    tab_size: int
    indent_size: int
    indent_style: IndentStyle
    insert_tabs: bool


class FileReport(BaseModel):
    """Observation, directive and advice for one file."""

    path: Path
    starts_with_space: bool = False
    starts_with_tabs: bool = False
    guessed_indent_size: int = 0
    directive_path: Path | None = None
    settings: SettingsReport | None = None
    advice: str | None = None
    error: str | None = None


class ScanReport(BaseModel):
    """Output of scan_tree: one FileReport per text file under root."""

    root: Path
    files: list[FileReport] = Field(default_factory=lambda: list[FileReport]())

    @property
    def flagged(self) -> list[FileReport]:
        return [f for f in self.files if f.advice or f.error]
