"""
Level threshold table.

Static data: an ordered tuple of immutable records mapping each level to the
cumulative XP it requires and the rank label it carries. Loaded once at
import; the calculator does lookups over it, never branching on level values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class LevelThreshold:
    level: int
    required_xp: int
    rank: str


def _build(rank: str, *entries: Tuple[int, int]) -> Tuple[LevelThreshold, ...]:
    return tuple(LevelThreshold(level, xp, rank) for level, xp in entries)


DEFAULT_LEVEL_TABLE: Tuple[LevelThreshold, ...] = (
    *_build("Cadet", (1, 0), (2, 50)),
    *_build("Ensign", (3, 120), (4, 200)),
    *_build("Lieutenant", (5, 300), (6, 420), (7, 560), (8, 720)),
    *_build(
        "Commander", (9, 900), (10, 1100), (11, 1350), (12, 1620), (13, 1920)
    ),
    *_build(
        "Captain",
        (14, 2250), (15, 2600), (16, 3000), (17, 3450), (18, 3950), (19, 4500),
    ),
    *_build(
        "Admiral",
        (20, 5100), (21, 5750), (22, 6450), (23, 7200),
        (24, 8000), (25, 8850), (26, 9750), (27, 10700),
    ),
    *_build(
        "Galactic Hero",
        (28, 11700), (29, 12750), (30, 13850), (31, 15000), (32, 16200),
        (33, 17450), (34, 18750), (35, 20100), (36, 21500), (37, 22950),
        (38, 24450), (39, 26000), (40, 27600),
    ),
    *_build(
        "Galactic Legend",
        (41, 30000), (42, 32500), (43, 35100), (44, 37800), (45, 40600),
        (46, 43500), (47, 46500), (48, 49600), (49, 52800), (50, 56100),
    ),
)

MAX_LEVEL: int = DEFAULT_LEVEL_TABLE[-1].level
