"""Tests for the lane layout."""

from depbridge.config import DEFAULT_CONFIG
from depbridge.layout import assign_slots, build_edges, edge_label, layout, render_positions
from depbridge.models import DependencyImportance, DependencyNode, DependencyType, Position


def _node(name, importance=DependencyImportance.LOW, reference_count=1, **kwargs):
    return DependencyNode(
        path=f"src/{name}",
        name=name,
        importance=importance,
        reference_count=reference_count,
        **kwargs,
    )


SOURCE = _node("page.tsx", DependencyImportance.CRITICAL)


class TestLanes:
    """Tests for lane placement."""

    def test_source_at_origin(self):
        """Test the source node is always at the origin."""
        assert layout(SOURCE, [], []) == {"source": Position(0.0, 0.0)}

    def test_lane_x_offsets(self):
        """Test each importance tier gets its own column."""
        deps = [
            _node("a.ts", DependencyImportance.CRITICAL),
            _node("b.ts", DependencyImportance.HIGH),
            _node("c.ts", DependencyImportance.MEDIUM),
            _node("d.ts", DependencyImportance.LOW),
        ]

        positions = layout(SOURCE, deps, [])

        assert [positions[f"dep-{i}"].x for i in range(4)] == [420.0, 760.0, 1080.0, 1400.0]
        assert all(positions[f"dep-{i}"].y == 0.0 for i in range(4))

    def test_rows_are_centred(self):
        """Test three nodes in one lane straddle y = 0."""
        deps = [_node(name, DependencyImportance.CRITICAL) for name in ("a.ts", "b.ts", "c.ts")]

        positions = layout(SOURCE, deps, [])

        assert [positions[f"dep-{i}"] for i in range(3)] == [
            Position(420.0, -92.0),
            Position(420.0, 0.0),
            Position(420.0, 92.0),
        ]

    def test_lane_order_by_reference_count_then_name(self):
        """Test busier nodes sit higher in their lane."""
        deps = [
            _node("a.ts", DependencyImportance.HIGH, reference_count=1),
            _node("b.ts", DependencyImportance.HIGH, reference_count=4),
        ]

        positions = layout(SOURCE, deps, [])

        assert positions["dep-1"].y < positions["dep-0"].y

    def test_column_wrap(self):
        """Test a lane wraps after the configured number of rows."""
        deps = [_node(f"f{i:02d}.ts") for i in range(12)]

        positions = layout(SOURCE, deps, [])

        first_column = [positions[f"dep-{i}"] for i in range(10)]
        second_column = [positions[f"dep-{i}"] for i in range(10, 12)]
        assert {p.x for p in first_column} == {1400.0}
        assert [p.y for p in first_column] == [-414.0 + 92.0 * row for row in range(10)]
        assert second_column == [Position(1620.0, -46.0), Position(1620.0, 46.0)]

    def test_custom_rows_per_column(self):
        """Test the wrap point comes from configuration."""
        config = DEFAULT_CONFIG.with_overrides(rows_per_column=2)
        deps = [_node(f"f{i}.ts", DependencyImportance.MEDIUM) for i in range(3)]

        positions = layout(SOURCE, deps, [], config)

        assert positions["dep-2"] == Position(1300.0, 0.0)

    def test_dependents_are_mirrored(self):
        """Test dependents use negative x."""
        dependents = [_node("user.tsx", DependencyImportance.HIGH)]
        deps = [_node("lib.ts", DependencyImportance.HIGH)]

        positions = layout(SOURCE, deps, dependents)

        assert positions["dep-0"] == Position(760.0, 0.0)
        assert positions["dependent-0"] == Position(-760.0, 0.0)

    def test_positions_are_unique(self):
        """Test no two nodes share a position."""
        deps = [_node(f"d{i}.ts", importance) for i, importance in enumerate(DependencyImportance) for _ in range(3)]
        dependents = [_node(f"u{i}.ts", DependencyImportance.MEDIUM) for i in range(15)]

        positions = layout(SOURCE, deps, dependents)

        assert len(set(positions.values())) == len(positions) == 1 + len(deps) + len(dependents)

    def test_repeatable(self):
        """Test identical input gives identical output."""
        deps = [_node(f"d{i}.ts", DependencyImportance.LOW, reference_count=i % 3) for i in range(25)]

        assert layout(SOURCE, deps, deps) == layout(SOURCE, deps, deps)


class TestSlots:
    """Tests for the grid step on its own."""

    def test_slots(self):
        """Test side, lane, column and row assignment."""
        slots = assign_slots([_node("a.ts", DependencyImportance.HIGH)], [_node("b.ts")], rows_per_column=10)

        assert slots["dep-0"].side == 1
        assert slots["dep-0"].lane == 1
        assert slots["dependent-0"].side == -1
        assert slots["dependent-0"].lane == 3
        assert slots["dependent-0"].rows_in_column == 1

    def test_render_uses_config_spacing(self):
        """Test lane offsets come from configuration."""
        config = DEFAULT_CONFIG.with_overrides(lane_offsets={"critical": 100, "high": 200, "medium": 300, "low": 400})
        slots = assign_slots([_node("a.ts", DependencyImportance.MEDIUM)], [])

        assert render_positions(slots, config)["dep-0"] == Position(300.0, 0.0)


class TestEdges:
    """Tests for rendered edges."""

    def test_edge_label(self):
        """Test labels keep three symbols."""
        assert edge_label(["a", "b"]) == "a, b"
        assert edge_label(["a", "b", "c", "d"]) == "a, b, c..."
        assert edge_label([]) == ""

    def test_build_edges(self):
        """Test edge direction and ids on both sides."""
        dep = _node("lib.ts", DependencyImportance.HIGH, type=DependencyType.IMPORT, symbols=["x"], is_bidirectional=True)
        dependent = _node("user.tsx", DependencyImportance.LOW, type=DependencyType.COMPONENT)

        edges = build_edges([dep], [dependent])

        assert edges == [
            {
                "id": "edge-0",
                "source": "source",
                "target": "dep-0",
                "type": "import",
                "label": "x",
                "bidirectional": True,
                "importance": "high",
            },
            {
                "id": "dependent-edge-0",
                "source": "dependent-0",
                "target": "source",
                "type": "component",
                "label": "",
                "bidirectional": False,
                "importance": "low",
            },
        ]
