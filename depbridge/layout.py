"""Deterministic lane layout for the bridge view.

Layout happens in two steps. ``assign_slots`` places every node on an
abstract grid (side, lane, column, row) and ``render_positions`` turns the
grid into coordinates using the spacing constants from ``BridgeConfig``.
Dependencies sit to the right of the source, dependents mirror them on the
left, and each importance tier gets its own lane:

    dependents ... | source | critical  high  medium  low
"""

from typing import Dict, List, Sequence, Tuple

from .config import DEFAULT_CONFIG, BridgeConfig
from .models import IMPORTANCE_ORDER, DependencyNode, LayoutSlot, Position

SOURCE_ID = "source"
DEPENDENCY_SIDE = 1
DEPENDENT_SIDE = -1


def dependency_id(index: int) -> str:
    return f"dep-{index}"


def dependent_id(index: int) -> str:
    return f"dependent-{index}"


def lane_order_key(node: DependencyNode) -> Tuple[int, str, str]:
    return (-node.reference_count, node.name, node.path)


def _assign_side(nodes: Sequence[DependencyNode], side: int, make_id, rows_per_column: int) -> Dict[str, LayoutSlot]:
    slots: Dict[str, LayoutSlot] = {}

    lanes: Dict[int, List[int]] = {lane: [] for lane in range(len(IMPORTANCE_ORDER))}
    for index, node in enumerate(nodes):
        lanes[node.importance.rank].append(index)

    for lane, indices in lanes.items():
        indices.sort(key=lambda i: lane_order_key(nodes[i]))
        columns = max(1, -(-len(indices) // rows_per_column))

        for position, node_index in enumerate(indices):
            column, row = divmod(position, rows_per_column)
            if column == columns - 1:
                rows_in_column = len(indices) - column * rows_per_column
            else:
                rows_in_column = rows_per_column
            slots[make_id(node_index)] = LayoutSlot(
                side=side,
                lane=lane,
                column=column,
                row=row,
                rows_in_column=rows_in_column,
            )

    return slots


def assign_slots(
    dependency_nodes: Sequence[DependencyNode],
    dependent_nodes: Sequence[DependencyNode],
    rows_per_column: int = 10,
) -> Dict[str, LayoutSlot]:
    """Place nodes on the lane grid.

    Within a lane nodes are ordered by reference count (descending) and then
    by name, and wrap into a new column every ``rows_per_column`` rows.
    """
    slots = _assign_side(dependency_nodes, DEPENDENCY_SIDE, dependency_id, rows_per_column)
    slots.update(_assign_side(dependent_nodes, DEPENDENT_SIDE, dependent_id, rows_per_column))
    return slots


def render_positions(slots: Dict[str, LayoutSlot], config: BridgeConfig = DEFAULT_CONFIG) -> Dict[str, Position]:
    """Convert grid slots into coordinates around a source at (0, 0)."""
    positions = {SOURCE_ID: Position(0.0, 0.0)}
    for node_id, slot in slots.items():
        lane_x = float(config.lane_offsets[IMPORTANCE_ORDER[slot.lane].value])
        x = lane_x + slot.column * config.column_gap
        # Centre the column on y = 0.
        y0 = -((slot.rows_in_column - 1) * config.row_gap) / 2
        y = y0 + slot.row * config.row_gap
        positions[node_id] = Position(float(slot.side * x), float(y))
    return positions


def layout(
    source_node: DependencyNode,
    dependency_nodes: Sequence[DependencyNode],
    dependent_nodes: Sequence[DependencyNode],
    config: BridgeConfig = DEFAULT_CONFIG,
) -> Dict[str, Position]:
    """Compute positions for the source, its dependencies and its dependents.

    The source node always sits at the origin; callers translate and scale
    the result for display. The output is a pure function of the inputs.
    """
    slots = assign_slots(dependency_nodes, dependent_nodes, config.rows_per_column)
    return render_positions(slots, config)


def edge_label(symbols: Sequence[str], limit: int = 3) -> str:
    label = ", ".join(symbols[:limit])
    return label + "..." if len(symbols) > limit else label


def build_edges(
    dependency_nodes: Sequence[DependencyNode],
    dependent_nodes: Sequence[DependencyNode],
) -> List[dict]:
    """Render edges between the source and every neighbour."""
    edges = []
    for index, node in enumerate(dependency_nodes):
        edges.append({
            "id": f"edge-{index}",
            "source": SOURCE_ID,
            "target": dependency_id(index),
            "type": node.type.value,
            "label": edge_label(node.symbols),
            "bidirectional": node.is_bidirectional,
            "importance": node.importance.value,
        })
    for index, node in enumerate(dependent_nodes):
        edges.append({
            "id": f"dependent-edge-{index}",
            "source": dependent_id(index),
            "target": SOURCE_ID,
            "type": node.type.value,
            "label": edge_label(node.symbols),
            "bidirectional": node.is_bidirectional,
            "importance": node.importance.value,
        })
    return edges
