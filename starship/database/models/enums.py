"""
Database Model Enums
====================

Type-safe constants for categorical columns. Declarative schema helpers,
not business logic containers.
"""

from __future__ import annotations

import enum


class Difficulty(str, enum.Enum):
    """
    Mission difficulty tier.

    Each tier constrains the XP and coin rewards a mission may carry.
    """

    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class MissionCategory(str, enum.Enum):
    STUDY = "study"
    HEALTH = "health"
    CHORE = "chore"
    CREATIVE = "creative"
