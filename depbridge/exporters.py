"""Serialization of analysis results."""

import json
from typing import Any, Dict, List, Optional

import networkx as nx
from networkx.readwrite import json_graph

from .layout import SOURCE_ID, build_edges, dependency_id, dependent_id
from .models import BridgeGraph, DependencyNode, ResolvedEdge


def dependency_to_dict(node: DependencyNode) -> Dict[str, Any]:
    """FileDependency shape of one neighbour."""
    return {
        "path": node.path,
        "name": node.name,
        "type": node.type.value,
        "importance": node.importance.value,
        "referenceCount": node.reference_count,
        "symbols": list(node.symbols),
        "lineNumbers": list(node.line_numbers),
        "isBidirectional": node.is_bidirectional,
        "extension": node.extension,
        "isExternal": node.is_external,
    }


def edge_to_dict(edge: ResolvedEdge) -> Dict[str, Any]:
    return {
        "targetPath": edge.target_path,
        "importType": edge.kind_hint.value,
        "importNames": list(edge.symbol_names),
        "lineNumber": edge.line_number,
        "isExternal": edge.is_external,
        "isResolved": edge.is_resolved,
    }


def _render_node(node_id: str, node: DependencyNode, node_type: str, graph: BridgeGraph) -> Dict[str, Any]:
    position = graph.positions[node_id]
    return {
        "id": node_id,
        "path": node.path,
        "name": node.name,
        "extension": node.extension,
        "position": {"x": position.x, "y": position.y},
        "nodeType": node_type,
        "importance": node.importance.value,
        "dependencyTypes": [] if node_type == "source" else [node.type.value],
        "referenceCount": node.reference_count,
    }


def render_nodes(graph: BridgeGraph) -> List[Dict[str, Any]]:
    nodes = [_render_node(SOURCE_ID, graph.source_node, "source", graph)]
    for index, node in enumerate(graph.dependency_nodes):
        nodes.append(_render_node(dependency_id(index), node, "dependency", graph))
    for index, node in enumerate(graph.dependent_nodes):
        nodes.append(_render_node(dependent_id(index), node, "dependent", graph))
    return nodes


def to_bridge_data(graph: BridgeGraph, analyzed_at: Optional[str] = None) -> Dict[str, Any]:
    """Convert a ``BridgeGraph`` to the BridgeData response shape.

    Args:
        graph: The analysis result.
        analyzed_at: Optional timestamp added to the metadata. Left out by
            default so identical inputs serialize identically.
    """
    source = graph.source_node
    metadata: Dict[str, Any] = {
        "totalDependencies": graph.summary["total"],
        "criticalCount": graph.summary["critical"],
        "highCount": graph.summary["high"],
        "mediumCount": graph.summary["medium"],
        "lowCount": graph.summary["low"],
        "totalDependents": len(graph.dependent_nodes),
        "corpusImportance": source.corpus_importance,
    }
    if analyzed_at is not None:
        metadata["analyzedAt"] = analyzed_at

    return {
        "sourceFile": {
            "path": source.path,
            "name": source.name,
            "extension": source.extension,
            "exports": list(source.exported_symbols),
            "imports": [edge_to_dict(edge) for edge in source.dependency_edges],
        },
        "dependencies": [dependency_to_dict(node) for node in graph.dependency_nodes],
        "dependents": [dependency_to_dict(node) for node in graph.dependent_nodes],
        "nodes": render_nodes(graph),
        "edges": build_edges(graph.dependency_nodes, graph.dependent_nodes),
        "metadata": metadata,
        "issues": [
            {"kind": issue.kind.value, "path": issue.path, "detail": issue.detail, "line": issue.line}
            for issue in graph.issues
        ],
    }


def to_json(graph: BridgeGraph, indent: Optional[int] = 2, analyzed_at: Optional[str] = None) -> str:
    return json.dumps(to_bridge_data(graph, analyzed_at=analyzed_at), indent=indent)


def to_node_link(graph: nx.DiGraph) -> Dict[str, Any]:
    """Whole-repository graph in networkx node-link form, with statistics."""
    data = json_graph.node_link_data(graph, edges="links")
    stats = {
        "total_files": sum(1 for _, placeholder in graph.nodes(data="placeholder") if not placeholder),
        "total_unresolved": sum(1 for _, placeholder in graph.nodes(data="placeholder") if placeholder),
        "total_edges": graph.number_of_edges(),
        "total_imports": sum(count for _, _, count in graph.edges(data="count", default=1)),
        "total_exports": sum(len(exports or []) for _, exports in graph.nodes(data="exports")),
    }
    return {"graph": data, "metadata": {"stats": stats}}


def to_text(graph: BridgeGraph) -> str:
    """Human-readable summary used by the command line."""
    source = graph.source_node
    lines = [f"{source.path} (importance {source.corpus_importance})"]

    lines.append(f"Dependencies ({len(graph.dependency_nodes)}):")
    for node in graph.dependency_nodes:
        lines.append(_text_row(node))

    lines.append(f"Dependents ({len(graph.dependent_nodes)}):")
    for node in graph.dependent_nodes:
        lines.append(_text_row(node))

    if graph.issues:
        lines.append(f"Issues ({len(graph.issues)}):")
        lines.extend(f"  {issue}" for issue in graph.issues)
    return "\n".join(lines)


def _text_row(node: DependencyNode) -> str:
    flags = []
    if node.is_external:
        flags.append("external")
    if node.is_placeholder:
        flags.append("unresolved")
    if node.is_bidirectional:
        flags.append("bidirectional")
    suffix = f" [{', '.join(flags)}]" if flags else ""
    symbols = f" {{{', '.join(node.symbols)}}}" if node.symbols else ""
    return f"  {node.importance.value:<8} {node.type.value:<9} x{node.reference_count} {node.path}{symbols}{suffix}"
