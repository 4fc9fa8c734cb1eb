"""DepBridge - import/export neighbourhood analysis for JavaScript/TypeScript repositories."""

from .builder import CorpusIndex, build_graph, build_repository_graph
from .config import DEFAULT_CONFIG, BridgeConfig
from .corpus import load_corpus
from .errors import AnalysisIssue, BridgeError, IssueKind, SourceNotFoundError, UnsupportedSourceError
from .exporters import to_bridge_data, to_json, to_node_link
from .layout import layout
from .models import (
    AnalysisRequest,
    AnalysisResponse,
    BridgeGraph,
    DependencyImportance,
    DependencyNode,
    DependencyType,
    ImportKind,
    ImportRecord,
    Language,
    Position,
    ResolvedEdge,
    SourceUnit,
)
from .resolver import Resolution, resolve
from .scanner import scan
from .scoring import classify, corpus_importance, score
from .service import analyze

__version__ = "0.1.0"

__all__ = [
    "AnalysisIssue",
    "AnalysisRequest",
    "AnalysisResponse",
    "BridgeConfig",
    "BridgeError",
    "BridgeGraph",
    "CorpusIndex",
    "DEFAULT_CONFIG",
    "DependencyImportance",
    "DependencyNode",
    "DependencyType",
    "ImportKind",
    "ImportRecord",
    "IssueKind",
    "Language",
    "Position",
    "Resolution",
    "ResolvedEdge",
    "SourceNotFoundError",
    "SourceUnit",
    "UnsupportedSourceError",
    "analyze",
    "build_graph",
    "build_repository_graph",
    "classify",
    "corpus_importance",
    "layout",
    "load_corpus",
    "resolve",
    "scan",
    "score",
    "to_bridge_data",
    "to_json",
    "to_node_link",
]
