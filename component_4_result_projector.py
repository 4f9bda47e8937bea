"""
Result Projector for SixNine
Reduces level tables to the public result mappings.

Only complete integer entries are surfaced. Incomplete integers and
non-integer building blocks stay internal to the enumeration engine.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from component_3_level_table import LevelTable


class ResultProjector:
    """Read-only view over a sequence of frozen level tables"""

    def __init__(self, levels: Sequence[LevelTable]):
        self.levels = list(levels)

    def project_level(self, level: int) -> Dict[str, str]:
        """{integer key: display} for the complete entries of one level"""
        return {key: term.display for key, term in self.levels[level].complete_items()}

    def project(self) -> List[Dict[str, str]]:
        """One mapping per level, index = operation count"""
        return [self.project_level(level) for level in range(len(self.levels))]

    def settled_index(self) -> List[Tuple[str, int]]:
        """All surfaced keys with their level, in discovery order"""
        return [
            (key, table.level)
            for table in self.levels
            for key, _ in table.complete_items()
        ]

    def find(self, key: str) -> Optional[Tuple[int, str]]:
        """(level, display) of the surfaced entry for `key`, if any"""
        for table in self.levels:
            term = table.get(key)
            if term is not None and term.complete:
                return table.level, term.display
        return None


def project(levels: Sequence[LevelTable]) -> List[Dict[str, str]]:
    return ResultProjector(levels).project()


def project_settled(levels: Sequence[LevelTable]) -> List[Tuple[str, int]]:
    return ResultProjector(levels).settled_index()
