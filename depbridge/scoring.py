"""Dependency classification and importance scoring.

Two distinct measures live here:

* the four-tier ``DependencyImportance`` of one edge in the focused bridge
  view (``score``), and
* the numeric corpus-wide importance of a file in the whole-repository view
  (``corpus_importance``).

They feed different consumers and are never mixed.
"""

import re
from typing import Iterable, Sequence

from .models import DependencyImportance, DependencyType, file_extension

STYLE_EXTENSIONS = frozenset([".css", ".scss", ".sass", ".less"])
ASSET_EXTENSIONS = frozenset([".png", ".jpg", ".jpeg", ".gif", ".svg", ".ico", ".webp", ".avif", ".bmp"])
DATA_EXTENSIONS = frozenset([".json", ".yaml", ".yml"])

TYPE_WEIGHTS = {
    DependencyType.COMPONENT: 4,
    DependencyType.IMPORT: 3,
    DependencyType.FUNCTION: 3,
    DependencyType.EXPORT: 3,
    DependencyType.TYPE: 2,
    DependencyType.API: 2,
    DependencyType.STYLE: 1,
    DependencyType.ASSET: 1,
    DependencyType.CONFIG: 1,
    DependencyType.UNKNOWN: 0,
}

BIDIRECTIONAL_BONUS = 2

_TYPE_MARKER = re.compile(r'^type\s|Type|Interface')


def _is_component_symbol(symbol: str) -> bool:
    return symbol[:1].isupper() and "Type" not in symbol and "Interface" not in symbol


def _is_type_symbol(symbol: str) -> bool:
    return _TYPE_MARKER.search(symbol) is not None


def classify(target_path: str, symbol_names: Sequence[str]) -> DependencyType:
    """Assign a dependency kind; the first matching rule wins."""
    ext = file_extension(target_path).lower()

    if ext in STYLE_EXTENSIONS:
        return DependencyType.STYLE
    if ext in ASSET_EXTENSIONS:
        return DependencyType.ASSET
    if ext in DATA_EXTENSIONS:
        return DependencyType.CONFIG
    if "api" in target_path.split("/")[:-1]:
        return DependencyType.API
    if any(_is_component_symbol(s) for s in symbol_names):
        return DependencyType.COMPONENT
    if any(_is_type_symbol(s) for s in symbol_names):
        return DependencyType.TYPE
    return DependencyType.IMPORT


def reference_bonus(reference_count: int) -> int:
    if reference_count >= 5:
        return 3
    if reference_count >= 3:
        return 2
    if reference_count >= 2:
        return 1
    return 0


def importance_score(dep_type: DependencyType, reference_count: int, is_bidirectional: bool) -> int:
    """Raw additive score behind ``score``."""
    total = TYPE_WEIGHTS[dep_type] + reference_bonus(reference_count)
    if is_bidirectional:
        total += BIDIRECTIONAL_BONUS
    return total


def bucket(total: int) -> DependencyImportance:
    if total >= 7:
        return DependencyImportance.CRITICAL
    if total >= 5:
        return DependencyImportance.HIGH
    if total >= 3:
        return DependencyImportance.MEDIUM
    return DependencyImportance.LOW


def score(dep_type: DependencyType, global_reference_count: int, is_bidirectional: bool) -> DependencyImportance:
    """Four-tier importance of one edge."""
    return bucket(importance_score(dep_type, global_reference_count, is_bidirectional))


def is_bidirectional(source_path: str, target_path: str, target_imports: Iterable[str]) -> bool:
    """True when the target's resolved imports point back at the source.

    ``target_imports`` is empty when the target's content is not in the corpus.
    """
    return source_path != target_path and source_path in set(target_imports)


def path_bonus(path: str) -> int:
    if "/lib/" in path or "/utils/" in path:
        return 5
    if "/components/" in path:
        return 3
    if "/types/" in path:
        return 4
    return 0


def corpus_importance(path: str, exported_symbol_count: int, importer_count: int) -> int:
    """Numeric importance of a file across the whole corpus.

    Args:
        path: Corpus path of the file.
        exported_symbol_count: Number of distinct exported symbols.
        importer_count: Number of distinct files importing it.
    """
    return 10 * importer_count + 2 * exported_symbol_count + path_bonus(path)


def file_role(path: str) -> str:
    """Coarse role of a file, used by the whole-repository graph view."""
    name = path.rsplit("/", 1)[-1]
    if "/components/" in path:
        return "component"
    if "/lib/" in path or "/utils/" in path:
        return "utility"
    if "/types/" in path:
        return "type"
    if "/api/" in path:
        return "api"
    if "/app/" in path and name in ("page.tsx", "page.ts", "page.jsx", "page.js"):
        return "page"
    if name.endswith((".config.ts", ".config.js", ".config.mjs", ".json")):
        return "config"
    if name.endswith((".css", ".scss", ".sass", ".less")):
        return "style"
    return "file"
