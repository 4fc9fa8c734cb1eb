"""Module path resolution against a known set of corpus paths."""

import re
from typing import AbstractSet, NamedTuple, Optional

from .config import DEFAULT_CONFIG, BridgeConfig

_DUPLICATE_SLASHES = re.compile(r"/{2,}")


class Resolution(NamedTuple):
    target_path: str
    is_external: bool
    is_resolved: bool = True


def is_external(specifier: str, config: BridgeConfig = DEFAULT_CONFIG) -> bool:
    """A specifier is external unless it is relative, root-relative or aliased."""
    if specifier.startswith((".", "/")):
        return False
    return not any(specifier.startswith(alias) for alias in config.alias_map)


def parent_directory(path: str) -> str:
    return path.rsplit("/", 1)[0] if "/" in path else ""


def clean_path(path: str) -> str:
    """Collapse duplicate slashes and strip leading and trailing slashes."""
    return _DUPLICATE_SLASHES.sub("/", path).strip("/")


def assemble_path(specifier: str, importer_path: str, config: BridgeConfig = DEFAULT_CONFIG) -> str:
    """Turn an internal specifier into a corpus-relative path without probing.

    Aliases are rewritten to their root-relative prefix. Relative specifiers
    are walked segment by segment from the importer's directory; when a
    ``..`` would climb above the repository root the raw specifier is kept.
    """
    for alias, replacement in config.alias_map.items():
        if specifier.startswith(alias):
            return clean_path(replacement + specifier[len(alias):])

    if not specifier.startswith("."):
        # Root-relative, e.g. "/lib/foo".
        return clean_path(specifier)

    parts = [p for p in parent_directory(importer_path).split("/") if p]
    for segment in specifier.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if not parts:
                return clean_path(specifier)
            parts.pop()
        else:
            parts.append(segment)

    return clean_path("/".join(parts))


def probe(candidate: str, known_paths: AbstractSet[str], config: BridgeConfig = DEFAULT_CONFIG) -> Optional[str]:
    """Return the first ``candidate + suffix`` present in ``known_paths``."""
    for suffix in config.probe_suffixes:
        test_path = candidate + suffix if candidate else suffix.lstrip("/")
        if test_path in known_paths:
            return test_path
    return None


def resolve(
    specifier: str,
    importer_path: str,
    known_paths: AbstractSet[str],
    config: BridgeConfig = DEFAULT_CONFIG,
) -> Resolution:
    """Resolve an import specifier to a corpus path.

    Args:
        specifier: The string as written inside the import statement.
        importer_path: Corpus path of the file containing the statement.
        known_paths: Every path present in the corpus.
        config: Alias map, source root and probe order.

    Returns:
        A ``Resolution``. External specifiers pass through unchanged. An
        internal specifier that matches nothing keeps its assembled path with
        ``is_resolved`` set to False.
    """
    if is_external(specifier, config):
        return Resolution(specifier, True, True)

    assembled = assemble_path(specifier, importer_path, config)

    found = probe(assembled, known_paths, config)
    if found is not None:
        return Resolution(found, False, True)

    root = config.source_root
    if root and assembled.startswith(root):
        found = probe(assembled[len(root):], known_paths, config)
        if found is not None:
            return Resolution(found, False, True)

    return Resolution(assembled, False, False)
