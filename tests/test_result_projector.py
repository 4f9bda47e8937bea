# tests/test_result_projector.py
"""
Tests for the result projector (component_4).

Tests:
- Only complete integer entries are surfaced
- Discovery order is preserved
- Settled index and single-key lookup
"""

import pytest

from component_2_term_model import Operator, combine, leaf_terms
from component_3_enumeration_engine import EnumerationEngine
from component_3_level_table import LevelTable
from component_4_result_projector import ResultProjector, project, project_settled
from component_6_search_config import SearchConfig


@pytest.fixture
def handmade_levels():
    """Fixture: two small frozen tables with mixed entries"""
    leaves = {term.atom.value: term for term in leaf_terms()}

    level_zero = LevelTable(0)
    for term in leaf_terms():
        level_zero.retain(term.atom.display, term)
    level_zero.freeze()

    level_one = LevelTable(1)
    level_one.retain("75", combine(leaves[69], Operator.ADD, leaves[6]))
    level_one.retain("0", combine(leaves[69], Operator.SUBTRACT, leaves[69]))
    level_one.retain_non_integer(combine(leaves[6], Operator.DIVIDE, leaves[9]))
    level_one.retain("3", combine(leaves[-6], Operator.ADD, leaves[9]))
    level_one.freeze()

    return [level_zero, level_one]


class TestProjection:
    """Tests for project / project_level"""

    def test_only_complete_integers(self, handmade_levels):
        result = project(handmade_levels)
        assert result == [
            {"69": "69", "-69": "-69"},
            {"0": "(69 - 69)", "3": "(-6 + 9)"},
        ]

    def test_discovery_order(self, handmade_levels):
        assert list(ResultProjector(handmade_levels).project_level(1)) == ["0", "3"]

    def test_engine_output(self):
        engine = EnumerationEngine(SearchConfig(max_operations=2, include_power=False))
        engine.run()
        projector = ResultProjector(engine.levels)
        levels = projector.project()

        assert len(levels) == 3
        assert levels[1]["3"] == "(-6 + 9)"
        # Level 1 is an intermediate level and keeps entries that are not surfaced
        assert len(levels[1]) < len(engine.levels[1])


class TestSettledIndex:
    """Tests for settled_index and find"""

    def test_settled_index(self, handmade_levels):
        assert project_settled(handmade_levels) == [
            ("69", 0),
            ("-69", 0),
            ("0", 1),
            ("3", 1),
        ]

    def test_find(self, handmade_levels):
        projector = ResultProjector(handmade_levels)
        assert projector.find("3") == (1, "(-6 + 9)")
        assert projector.find("-69") == (0, "-69")

    def test_find_ignores_incomplete_entries(self, handmade_levels):
        projector = ResultProjector(handmade_levels)
        assert projector.find("75") is None
        assert projector.find("6") is None
        assert projector.find("424242") is None
