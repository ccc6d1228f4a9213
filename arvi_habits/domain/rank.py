# arvi_habits/domain/rank.py
"""Series rank tiers derived from accumulated score."""

from enum import Enum


class Rank(str, Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLDEN = "golden"
    DIAMOND = "diamond"


# (minimum score, rank), highest threshold first
_RANK_THRESHOLDS = [
    (1000, Rank.DIAMOND),
    (600, Rank.GOLDEN),
    (300, Rank.SILVER),
]


def rank_from_score(total_score: int) -> Rank:
    """Map a total score to its rank tier."""
    for threshold, rank in _RANK_THRESHOLDS:
        if total_score >= threshold:
            return rank
    return Rank.BRONZE
