"""Exceptions and non-fatal diagnostics raised during an analysis."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class BridgeError(Exception):
    """Base class for analyzer failures."""


class SourceNotFoundError(BridgeError):
    """The requested source path is not present in the corpus."""

    def __init__(self, path: str):
        super().__init__(f"Source file not found in corpus: {path}")
        self.path = path


class UnsupportedSourceError(BridgeError):
    """The requested source path has an extension the analyzer does not scan."""

    def __init__(self, path: str, extension: str):
        super().__init__(f"File type {extension or '(none)'} is not supported for analysis: {path}")
        self.path = path
        self.extension = extension


class IssueKind(str, Enum):
    UNRESOLVED_IMPORT = "unresolved_import"
    UNSUPPORTED_LANGUAGE = "unsupported_language"
    MALFORMED_SPECIFIER = "malformed_specifier"


@dataclass(frozen=True)
class AnalysisIssue:
    """A condition that degraded the analysis without aborting it."""

    kind: IssueKind
    path: str
    detail: str = ""
    line: Optional[int] = None

    def __str__(self) -> str:
        where = f"{self.path}:{self.line}" if self.line else self.path
        return f"{self.kind.value} at {where}: {self.detail}" if self.detail else f"{self.kind.value} at {where}"
