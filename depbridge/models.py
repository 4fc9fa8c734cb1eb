"""Data model shared by the scanner, resolver, scorer, builder and layout."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .errors import AnalysisIssue


class Language(str, Enum):
    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    VUE = "vue"
    SVELTE = "svelte"
    ASTRO = "astro"
    CSS = "css"
    JSON = "json"
    YAML = "yaml"
    TOML = "toml"
    PYTHON = "python"
    RUST = "rust"
    GO = "go"
    JAVA = "java"
    KOTLIN = "kotlin"
    CSHARP = "csharp"
    C = "c"
    CPP = "cpp"
    RUBY = "ruby"
    PHP = "php"
    UNKNOWN = "unknown"


class ImportKind(str, Enum):
    """How a statement binds the module it references."""

    DEFAULT = "default"
    NAMED = "named"
    NAMESPACE = "namespace"
    SIDE_EFFECT = "sideEffect"
    DYNAMIC = "dynamic"
    REQUIRE_CALL = "requireCall"


class DependencyType(str, Enum):
    COMPONENT = "component"
    STYLE = "style"
    TYPE = "type"
    API = "api"
    CONFIG = "config"
    ASSET = "asset"
    IMPORT = "import"
    EXPORT = "export"
    FUNCTION = "function"
    UNKNOWN = "unknown"


class DependencyImportance(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort rank, 0 for the most important tier."""
        return _IMPORTANCE_RANK[self]


_IMPORTANCE_RANK = {
    DependencyImportance.CRITICAL: 0,
    DependencyImportance.HIGH: 1,
    DependencyImportance.MEDIUM: 2,
    DependencyImportance.LOW: 3,
}

IMPORTANCE_ORDER: Tuple[DependencyImportance, ...] = (
    DependencyImportance.CRITICAL,
    DependencyImportance.HIGH,
    DependencyImportance.MEDIUM,
    DependencyImportance.LOW,
)


_EXTENSION_LANGUAGES = {
    ".ts": Language.TYPESCRIPT,
    ".tsx": Language.TYPESCRIPT,
    ".mts": Language.TYPESCRIPT,
    ".cts": Language.TYPESCRIPT,
    ".js": Language.JAVASCRIPT,
    ".jsx": Language.JAVASCRIPT,
    ".mjs": Language.JAVASCRIPT,
    ".cjs": Language.JAVASCRIPT,
    ".vue": Language.VUE,
    ".svelte": Language.SVELTE,
    ".astro": Language.ASTRO,
    ".css": Language.CSS,
    ".scss": Language.CSS,
    ".sass": Language.CSS,
    ".less": Language.CSS,
    ".json": Language.JSON,
    ".yaml": Language.YAML,
    ".yml": Language.YAML,
    ".toml": Language.TOML,
    ".py": Language.PYTHON,
    ".pyw": Language.PYTHON,
    ".pyi": Language.PYTHON,
    ".rs": Language.RUST,
    ".go": Language.GO,
    ".java": Language.JAVA,
    ".kt": Language.KOTLIN,
    ".kts": Language.KOTLIN,
    ".cs": Language.CSHARP,
    ".c": Language.C,
    ".h": Language.C,
    ".cpp": Language.CPP,
    ".cxx": Language.CPP,
    ".cc": Language.CPP,
    ".hpp": Language.CPP,
    ".hxx": Language.CPP,
    ".hh": Language.CPP,
    ".rb": Language.RUBY,
    ".rake": Language.RUBY,
    ".php": Language.PHP,
    ".phtml": Language.PHP,
}


def file_name(path: str) -> str:
    """Return the last path segment."""
    return path.rsplit("/", 1)[-1]


def file_extension(path: str) -> str:
    """Return the extension of the last path segment, dot included, or ''."""
    name = file_name(path)
    idx = name.rfind(".")
    return name[idx:] if idx > 0 else ""


def detect_language(path: str) -> Language:
    return _EXTENSION_LANGUAGES.get(file_extension(path).lower(), Language.UNKNOWN)


@dataclass(frozen=True)
class SourceUnit:
    path: str
    content: str
    language: Language

    @classmethod
    def from_corpus(cls, path: str, content: str) -> "SourceUnit":
        return cls(path=path, content=content, language=detect_language(path))


@dataclass(frozen=True)
class ImportRecord:
    """One import/require/re-export statement found in a file."""

    raw_specifier: str
    kind_hint: ImportKind
    symbol_names: Tuple[str, ...] = ()
    line_number: int = 1
    source_unit_path: str = ""


@dataclass(frozen=True)
class ResolvedEdge:
    """An ImportRecord after path resolution.

    ``is_resolved`` is False when the target is internal but no matching
    path exists in the corpus.
    """

    record: ImportRecord
    target_path: str
    is_external: bool
    is_resolved: bool = True

    @property
    def source_path(self) -> str:
        return self.record.source_unit_path

    @property
    def kind_hint(self) -> ImportKind:
        return self.record.kind_hint

    @property
    def symbol_names(self) -> Tuple[str, ...]:
        return self.record.symbol_names

    @property
    def line_number(self) -> int:
        return self.record.line_number


@dataclass
class DependencyNode:
    """A corpus file as seen from one analysis."""

    path: str
    name: str
    type: DependencyType = DependencyType.UNKNOWN
    importance: DependencyImportance = DependencyImportance.LOW
    reference_count: int = 0
    exported_symbols: List[str] = field(default_factory=list)
    dependency_edges: List[ResolvedEdge] = field(default_factory=list)
    is_bidirectional: bool = False
    symbols: List[str] = field(default_factory=list)
    line_numbers: List[int] = field(default_factory=list)
    extension: str = ""
    is_external: bool = False
    is_placeholder: bool = False
    corpus_importance: int = 0

    def sort_key(self) -> Tuple[int, str, str]:
        return (self.importance.rank, self.name, self.path)


@dataclass(frozen=True)
class Position:
    x: float
    y: float


@dataclass(frozen=True)
class LayoutSlot:
    """Grid placement of one node before it is rendered to coordinates.

    ``side`` is 1 for dependencies and -1 for dependents.
    """

    side: int
    lane: int
    column: int
    row: int
    rows_in_column: int


@dataclass(frozen=True)
class BridgeGraph:
    """Result of one analysis, never mutated after construction."""

    source_node: DependencyNode
    dependency_nodes: Tuple[DependencyNode, ...]
    dependent_nodes: Tuple[DependencyNode, ...]
    positions: Dict[str, Position]
    summary: Dict[str, int]
    issues: Tuple[AnalysisIssue, ...] = ()

    @property
    def total_dependencies(self) -> int:
        return len(self.dependency_nodes)

    def node_ids(self) -> Dict[str, DependencyNode]:
        """Map layout ids to their nodes."""
        ids = {"source": self.source_node}
        for i, node in enumerate(self.dependency_nodes):
            ids[f"dep-{i}"] = node
        for i, node in enumerate(self.dependent_nodes):
            ids[f"dependent-{i}"] = node
        return ids


@dataclass(frozen=True)
class AnalysisRequest:
    source_path: str
    corpus: Dict[str, str]


@dataclass(frozen=True)
class AnalysisResponse:
    success: bool
    data: Optional[dict] = None
    error: Optional[str] = None
    status: int = 200
