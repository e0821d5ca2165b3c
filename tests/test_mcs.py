"""Tests for the maximum common subgraph search."""

import pytest

from fragmine import get_mcs_strategy, list_strategies, max_common_subgraph
from fragmine.algorithms.base import SearchStrategy, register
from fragmine.algorithms.mcs import EdgeDrivenMCS, NodeDrivenMCS

from conftest import CARBON, DOUBLE, OXYGEN, SINGLE, assert_unmarked, build

STRATEGIES = ["edge", "node"]


@pytest.mark.parametrize("strategy", STRATEGIES)
class TestMaxCommonSubgraph:
    def test_identical_graphs(self, ethanol, strategy):
        result = max_common_subgraph(ethanol, ethanol.copy(), strategy=strategy)

        assert result.cost == 0
        assert result.edit_cost == 0
        assert result.size == 5
        assert result.graph.same_structure(ethanol)

    def test_ring_against_itself(self, cyclohexane, strategy):
        result = max_common_subgraph(cyclohexane, cyclohexane.copy(), strategy=strategy)

        assert result.cost == 0
        assert sorted(result.node_map) == list(range(6))

    def test_no_common_types(self, bond, strategy):
        oxygen = build([OXYGEN, OXYGEN], [(0, 1, DOUBLE)])

        result = max_common_subgraph(bond, oxygen, strategy=strategy)

        assert result.cost == 3
        assert result.edit_cost == 6
        assert result.size == 0
        assert result.graph.node_count == 0

    def test_contained_graph(self, bond, ethanol, strategy):
        result = max_common_subgraph(bond, ethanol, strategy=strategy)

        assert result.cost == 0
        assert result.edit_cost == 2
        assert all(i >= 0 for i in result.node_map)

    def test_partial_overlap(self, ethanol, strategy):
        propane = build([CARBON] * 3, [(0, 1, SINGLE), (1, 2, SINGLE)])

        result = max_common_subgraph(ethanol, propane, strategy=strategy)

        assert result.cost == 2
        assert result.edit_cost == 4
        assert result.node_map[2] == -1
        assert result.edge_map[1] == -1

    def test_maps_are_consistent(self, two_triangles, strategy):
        other = build(
            [CARBON] * 4,
            [(0, 1, SINGLE), (1, 2, SINGLE), (2, 0, SINGLE), (2, 3, SINGLE)],
        )

        result = max_common_subgraph(two_triangles, other, strategy=strategy)

        assert result.cost == 0
        images = [i for i in result.node_map if i >= 0]
        assert len(images) == len(set(images))
        for e, image in enumerate(result.edge_map):
            if image < 0:
                continue
            src, dst = two_triangles.edges[e].src, two_triangles.edges[e].dst
            mapped = {result.node_map[src], result.node_map[dst]}
            assert mapped == {other.edges[image].src, other.edges[image].dst}

    def test_inputs_untouched(self, ethanol, strategy):
        other = ethanol.copy()
        max_common_subgraph(ethanol, other, strategy=strategy)

        assert_unmarked(ethanol)
        assert_unmarked(other)
        assert [n.type for n in ethanol.nodes] == [CARBON, CARBON, OXYGEN]


class TestStrategies:
    def test_registered(self):
        assert list_strategies() == ["edge", "node"]
        assert get_mcs_strategy("EDGE") is EdgeDrivenMCS
        assert get_mcs_strategy("node") is NodeDrivenMCS

    def test_unknown_strategy(self):
        with pytest.raises(ValueError, match="Unknown MCS strategy"):
            get_mcs_strategy("clique")

    def test_by_node_flag(self, ethanol):
        result = max_common_subgraph(ethanol, ethanol.copy(), by_node=True)
        assert result.cost == 0

    def test_duplicate_registration(self):
        class Again(SearchStrategy):
            name = "edge"

            def run(self, *graphs, **kwargs):
                return None

        with pytest.raises(ValueError):
            register(Again)
        assert get_mcs_strategy("edge") is EdgeDrivenMCS

    def test_register_requires_strategy(self):
        with pytest.raises(TypeError):
            register(dict)

    def test_verbose_logging(self, ethanol, caplog):
        with caplog.at_level("DEBUG", logger="fragmine"):
            max_common_subgraph(ethanol, ethanol.copy(), verbose=True)

        assert any("edit cost 0" in r.getMessage() for r in caplog.records)
