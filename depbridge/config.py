"""Configuration for the dependency-bridge analyzer."""

import dataclasses
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple

# File extensions that can have dependencies.
ANALYZABLE_EXTENSIONS: Tuple[str, ...] = (
    # JavaScript/TypeScript
    ".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs",
    # Frontend frameworks
    ".vue", ".svelte", ".astro",
    # Python
    ".py", ".pyw", ".pyi",
    # Rust
    ".rs",
    # Go
    ".go",
    # Java/Kotlin
    ".java", ".kt", ".kts",
    # C#
    ".cs",
    # C/C++
    ".c", ".cpp", ".cxx", ".cc", ".h", ".hpp", ".hxx", ".hh",
    # Ruby
    ".rb", ".rake",
    # PHP
    ".php", ".phtml",
    # Styles
    ".css", ".scss", ".sass", ".less",
    # Config
    ".json", ".yaml", ".yml", ".toml",
)

# Suffixes tried, in order, when resolving an internal specifier.
PROBE_SUFFIXES: Tuple[str, ...] = (
    "",
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    "/index.ts",
    "/index.tsx",
    "/index.js",
    "/index.jsx",
)

LANE_OFFSETS: Dict[str, float] = {
    "critical": 420,
    "high": 760,
    "medium": 1080,
    "low": 1400,
}

# Directories to ignore when loading a corpus from disk.
IGNORED_DIRECTORIES: FrozenSet[str] = frozenset([
    'node_modules', '.git', '.next', '.nuxt', 'dist', 'build', 'out', '.cache',
    'cache', 'coverage', '.turbo', '.vercel', '.svelte-kit', '__pycache__',
    '.venv', 'venv', '.tox', '.idea', '.vscode', 'target', 'vendor',
])

# Files to ignore when loading a corpus from disk.
IGNORED_FILES: FrozenSet[str] = frozenset([
    '.gitignore',
    '.env',
    'package-lock.json',
    'yarn.lock',
    'pnpm-lock.yaml',
])


def _default_alias_map() -> Dict[str, str]:
    return {"@/": "src/"}


@dataclass(frozen=True)
class BridgeConfig:
    """Tunable knobs for scanning, resolution, layout and corpus loading.

    Args:
        alias_map: Specifier prefixes rewritten to root-relative prefixes.
        source_root: Prefix stripped for the fallback resolution probe.
        analyzable_extensions: Extensions the graph builder scans.
        probe_suffixes: Suffixes tried against the known path set.
        rows_per_column: Layout rows before a lane wraps into a new column.
        lane_offsets: Horizontal offset of each importance lane.
        column_gap: Horizontal distance between wrapped columns.
        row_gap: Vertical distance between rows of a column.
        max_workers: Threads used for the per-file scan step (1 = sequential).
        max_file_bytes: Files larger than this are not loaded from disk.
        max_depth: Maximum directory depth when loading from disk.
    """

    alias_map: Dict[str, str] = field(default_factory=_default_alias_map)
    source_root: str = "src/"
    analyzable_extensions: Tuple[str, ...] = ANALYZABLE_EXTENSIONS
    probe_suffixes: Tuple[str, ...] = PROBE_SUFFIXES
    rows_per_column: int = 10
    lane_offsets: Dict[str, float] = field(default_factory=lambda: dict(LANE_OFFSETS))
    column_gap: float = 220
    row_gap: float = 92
    max_workers: int = 1
    max_file_bytes: int = 512 * 1024
    max_depth: Optional[int] = None
    ignored_directories: FrozenSet[str] = IGNORED_DIRECTORIES
    ignored_files: FrozenSet[str] = IGNORED_FILES

    def __post_init__(self):
        if self.rows_per_column < 1:
            raise ValueError("rows_per_column must be at least 1")
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")

    def with_overrides(self, **changes) -> "BridgeConfig":
        """Return a copy of this config with the given fields replaced."""
        return dataclasses.replace(self, **changes)

    def is_analyzable(self, path: str) -> bool:
        return path.lower().endswith(self.analyzable_extensions)


DEFAULT_CONFIG = BridgeConfig()
