"""Repository-wide graph construction and the focused bridge view."""

import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import networkx as nx

from .config import DEFAULT_CONFIG, BridgeConfig
from .errors import AnalysisIssue, IssueKind, SourceNotFoundError
from .layout import layout
from .models import (
    IMPORTANCE_ORDER,
    BridgeGraph,
    DependencyImportance,
    DependencyNode,
    ImportRecord,
    ResolvedEdge,
    detect_language,
    file_extension,
    file_name,
)
from .resolver import resolve
from .scanner import scan
from .scoring import classify, corpus_importance, file_role, score

logger = logging.getLogger(__name__)

ReverseIndex = Dict[str, Tuple[ResolvedEdge, ...]]


def fold_reverse_index(resolved: Mapping[str, Sequence[ResolvedEdge]]) -> ReverseIndex:
    """Fold every internal edge into ``target path -> edges pointing at it``.

    Files are visited in path order so the result never depends on the order
    the corpus was assembled in.
    """
    index = defaultdict(list)
    for path in sorted(resolved):
        for edge in resolved[path]:
            if not edge.is_external:
                index[edge.target_path].append(edge)
    return {target: tuple(edges) for target, edges in index.items()}


class CorpusIndex:
    """Scanned and resolved snapshot of one corpus.

    Holds the per-file import records and exports, the resolved edges, the
    reverse index and a ``networkx.DiGraph`` of internal file-to-file edges.
    A new index is built for every analysis; nothing is shared between calls.
    """

    def __init__(self, corpus: Mapping[str, str], config: BridgeConfig = DEFAULT_CONFIG):
        self.corpus = corpus
        self.config = config
        self.known_paths = frozenset(corpus)
        self.graph = nx.DiGraph()

        # path -> records / exported names, for every scanned file.
        self.imports: Dict[str, List[ImportRecord]] = {}
        self.exports: Dict[str, List[str]] = {}
        self.resolved: Dict[str, List[ResolvedEdge]] = {}
        self.reverse_index: ReverseIndex = {}
        self.issues: List[AnalysisIssue] = []

    @classmethod
    def build(cls, corpus: Mapping[str, str], config: BridgeConfig = DEFAULT_CONFIG) -> "CorpusIndex":
        index = cls(corpus, config)
        index._scan_corpus()
        index._resolve_imports()
        index.reverse_index = fold_reverse_index(index.resolved)
        index._build_graph()
        logger.debug(
            "Indexed %d files: %d internal edges, %d issues",
            len(index.imports), index.graph.number_of_edges(), len(index.issues),
        )
        return index

    @property
    def scanned_paths(self) -> List[str]:
        return sorted(self.imports)

    def _scan_file(self, path: str) -> Tuple[str, List[ImportRecord], List[str], List[AnalysisIssue]]:
        issues: List[AnalysisIssue] = []
        imports, exports = scan(self.corpus[path], detect_language(path), path=path, issues=issues)
        return path, imports, exports, issues

    def _scan_corpus(self):
        """Scan every analyzable file in the corpus."""
        paths = sorted(p for p in self.corpus if self.config.is_analyzable(p))

        if self.config.max_workers > 1 and len(paths) > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                results = list(executor.map(self._scan_file, paths))
        else:
            results = [self._scan_file(path) for path in paths]

        # executor.map keeps input order, so merging by path stays deterministic.
        for path, imports, exports, issues in results:
            self.imports[path] = imports
            self.exports[path] = exports
            self.issues.extend(issues)

    def _resolve_imports(self):
        for path in self.scanned_paths:
            edges = []
            for record in self.imports[path]:
                resolution = resolve(record.raw_specifier, path, self.known_paths, self.config)
                edge = ResolvedEdge(
                    record=record,
                    target_path=resolution.target_path,
                    is_external=resolution.is_external,
                    is_resolved=resolution.is_resolved,
                )
                if not edge.is_resolved:
                    self.issues.append(AnalysisIssue(
                        IssueKind.UNRESOLVED_IMPORT, path,
                        f"{record.raw_specifier!r} -> {edge.target_path}", record.line_number,
                    ))
                edges.append(edge)
            self.resolved[path] = edges

    def _build_graph(self):
        for path in self.scanned_paths:
            self.graph.add_node(path)

        for path in self.scanned_paths:
            for edge in self.resolved[path]:
                if edge.is_external:
                    continue
                target = edge.target_path
                if not self.graph.has_node(target):
                    self.graph.add_node(target)
                if self.graph.has_edge(path, target):
                    data = self.graph.edges[path, target]
                    data["count"] += 1
                    data["lines"].append(edge.line_number)
                    data["kinds"].append(edge.kind_hint.value)
                    data["symbols"].extend(s for s in edge.symbol_names if s not in data["symbols"])
                else:
                    self.graph.add_edge(
                        path,
                        target,
                        count=1,
                        lines=[edge.line_number],
                        kinds=[edge.kind_hint.value],
                        symbols=list(dict.fromkeys(edge.symbol_names)),
                    )

    def reference_count(self, path: str) -> int:
        """Number of import records anywhere in the corpus resolving to ``path``."""
        return len(self.reverse_index.get(path, ()))

    def importer_paths(self, path: str) -> List[str]:
        """Distinct files importing ``path``, sorted."""
        if not self.graph.has_node(path):
            return []
        return sorted(p for p in self.graph.predecessors(path) if p != path)

    def imports_from(self, importer: str, target: str) -> bool:
        return self.graph.has_edge(importer, target)

    def corpus_importance(self, path: str) -> int:
        if path not in self.corpus:
            return 0
        return corpus_importance(path, len(self.exports.get(path, [])), len(self.importer_paths(path)))

    def to_repository_graph(self) -> nx.DiGraph:
        """Annotated copy of the graph for the whole-repository view."""
        graph = self.graph.copy()
        for path, attrs in graph.nodes(data=True):
            attrs["name"] = file_name(path)
            attrs["role"] = file_role(path)
            attrs["language"] = detect_language(path).value
            attrs["exports"] = list(self.exports.get(path, []))
            attrs["importance"] = self.corpus_importance(path)
            attrs["placeholder"] = path not in self.corpus
        return graph


class _EdgeGroup:
    """Duplicate edges from one file to the same target."""

    def __init__(self, first: ResolvedEdge):
        self.first = first
        self.count = 0
        self.symbols: List[str] = []
        self.lines: List[int] = []

    def add(self, edge: ResolvedEdge):
        self.count += 1
        for symbol in edge.symbol_names:
            if symbol not in self.symbols:
                self.symbols.append(symbol)
        if edge.line_number not in self.lines:
            self.lines.append(edge.line_number)


def _group_edges(edges: Sequence[ResolvedEdge], key) -> Dict[str, _EdgeGroup]:
    groups: Dict[str, _EdgeGroup] = {}
    for edge in edges:
        k = key(edge)
        if k not in groups:
            groups[k] = _EdgeGroup(edge)
        groups[k].add(edge)
    return groups


def _dependency_node(source_path: str, target: str, group: _EdgeGroup, index: CorpusIndex) -> DependencyNode:
    first = group.first

    if first.is_external:
        # External packages stay out of the corpus index; count local references only.
        reference_count = group.count
        exports: List[str] = []
        bidirectional = False
    else:
        reference_count = index.reference_count(target)
        exports = list(index.exports.get(target, []))
        bidirectional = index.imports_from(target, source_path)

    is_placeholder = not first.is_external and target not in index.corpus
    dep_type = classify(target, group.symbols)
    # Missing files carry no weight.
    importance = DependencyImportance.LOW if is_placeholder else score(dep_type, reference_count, bidirectional)
    return DependencyNode(
        path=target,
        name=file_name(target),
        type=dep_type,
        importance=importance,
        reference_count=reference_count,
        exported_symbols=exports,
        is_bidirectional=bidirectional,
        symbols=list(group.symbols),
        line_numbers=list(group.lines),
        extension=file_extension(target),
        is_external=first.is_external,
        is_placeholder=is_placeholder,
        corpus_importance=0 if first.is_external else index.corpus_importance(target),
    )


def _dependent_node(source_path: str, importer: str, group: _EdgeGroup, index: CorpusIndex) -> DependencyNode:
    reference_count = index.reference_count(importer)
    bidirectional = index.imports_from(source_path, importer)
    dep_type = classify(source_path, group.symbols)
    return DependencyNode(
        path=importer,
        name=file_name(importer),
        type=dep_type,
        importance=score(dep_type, reference_count, bidirectional),
        reference_count=reference_count,
        exported_symbols=list(index.exports.get(importer, [])),
        is_bidirectional=bidirectional,
        symbols=list(group.symbols),
        line_numbers=list(group.lines),
        extension=file_extension(importer),
        corpus_importance=index.corpus_importance(importer),
    )


def summarize(dependency_nodes: Sequence[DependencyNode]) -> Dict[str, int]:
    summary = {"total": len(dependency_nodes)}
    for level in IMPORTANCE_ORDER:
        summary[level.value] = sum(1 for node in dependency_nodes if node.importance is level)
    return summary


def build_graph(
    source_path: str,
    corpus: Mapping[str, str],
    config: Optional[BridgeConfig] = None,
) -> BridgeGraph:
    """Analyze the dependency neighbourhood of one file.

    Args:
        source_path: Corpus path of the file to analyze.
        corpus: Mapping of corpus path to file text. It is only read.
        config: Analyzer configuration, defaults to ``DEFAULT_CONFIG``.

    Returns:
        The ``BridgeGraph`` with dependencies and dependents sorted by
        importance (critical first) and then by name.

    Raises:
        SourceNotFoundError: ``source_path`` is not a key of ``corpus``.
    """
    config = config or DEFAULT_CONFIG
    if source_path not in corpus:
        raise SourceNotFoundError(source_path)

    index = CorpusIndex.build(corpus, config)
    issues = [issue for issue in index.issues if issue.path == source_path]
    if not config.is_analyzable(source_path):
        issues.insert(0, AnalysisIssue(
            IssueKind.UNSUPPORTED_LANGUAGE, source_path,
            f"extension {file_extension(source_path) or '(none)'} is not scanned",
        ))

    source_edges = index.resolved.get(source_path, [])
    groups = _group_edges(
        [edge for edge in source_edges if edge.target_path != source_path],
        key=lambda edge: edge.target_path,
    )
    dependencies = sorted(
        (_dependency_node(source_path, target, group, index) for target, group in groups.items()),
        key=DependencyNode.sort_key,
    )

    incoming = [edge for edge in index.reverse_index.get(source_path, ()) if edge.source_path != source_path]
    dependent_groups = _group_edges(incoming, key=lambda edge: edge.source_path)
    dependents = sorted(
        (_dependent_node(source_path, importer, group, index) for importer, group in dependent_groups.items()),
        key=DependencyNode.sort_key,
    )

    exports = list(index.exports.get(source_path, []))
    source_node = DependencyNode(
        path=source_path,
        name=file_name(source_path),
        type=classify(source_path, exports),
        importance=DependencyImportance.CRITICAL,
        reference_count=index.reference_count(source_path),
        exported_symbols=exports,
        dependency_edges=list(source_edges),
        extension=file_extension(source_path),
        corpus_importance=index.corpus_importance(source_path),
    )

    logger.debug(
        "Bridge for %s: %d dependencies, %d dependents",
        source_path, len(dependencies), len(dependents),
    )

    return BridgeGraph(
        source_node=source_node,
        dependency_nodes=tuple(dependencies),
        dependent_nodes=tuple(dependents),
        positions=layout(source_node, dependencies, dependents, config),
        summary=summarize(dependencies),
        issues=tuple(issues),
    )


def build_repository_graph(corpus: Mapping[str, str], config: Optional[BridgeConfig] = None) -> nx.DiGraph:
    """Build the whole-repository graph with corpus-wide importance on every node."""
    return CorpusIndex.build(corpus, config or DEFAULT_CONFIG).to_repository_graph()
