"""Local corpus provider: materialize a corpus from a directory on disk."""

import logging
import os
from typing import Dict, Optional

from .config import DEFAULT_CONFIG, BridgeConfig

logger = logging.getLogger(__name__)


def _is_ignored(name: str, config: BridgeConfig) -> bool:
    return name in config.ignored_directories or (name.startswith(".") and name not in (".", ".."))


def load_corpus(directory: str, config: Optional[BridgeConfig] = None) -> Dict[str, str]:
    """Read every analyzable file under ``directory``.

    Args:
        directory: Root of the repository checkout.
        config: Supplies ignored directories and files, the size limit,
            the depth limit and the analyzable extensions.

    Returns:
        Mapping of posix-style path relative to ``directory`` to file text.
        Files that are too large, unreadable or not UTF-8 are skipped.
    """
    config = config or DEFAULT_CONFIG
    if not os.path.isdir(directory):
        raise NotADirectoryError(f"Directory does not exist: {directory}")

    corpus: Dict[str, str] = {}
    root_depth = os.path.abspath(directory).rstrip(os.sep).count(os.sep)

    for root, dirs, files in os.walk(directory):
        depth = os.path.abspath(root).rstrip(os.sep).count(os.sep) - root_depth
        # Remove ignored directories from dirs in-place to prevent walking into them.
        if config.max_depth is not None and depth >= config.max_depth:
            dirs[:] = []
        else:
            dirs[:] = sorted(d for d in dirs if not _is_ignored(d, config))

        for file in sorted(files):
            if file in config.ignored_files or not config.is_analyzable(file):
                continue

            file_path = os.path.join(root, file)
            relative_path = os.path.relpath(file_path, directory).replace(os.sep, "/")

            try:
                if os.path.getsize(file_path) > config.max_file_bytes:
                    logger.debug("Skipping %s: larger than %d bytes", relative_path, config.max_file_bytes)
                    continue
                with open(file_path, "r", encoding="utf-8") as f:
                    corpus[relative_path] = f.read()
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Skipping %s: %s", relative_path, e)

    logger.info("Loaded %d files from %s", len(corpus), directory)
    return corpus
