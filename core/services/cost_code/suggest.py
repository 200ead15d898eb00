from __future__ import annotations

from typing import Iterable

from core.models import CostCode


NAME_MATCH_SCORE = 10
DESCRIPTION_WORD_SCORE = 2
TAG_MATCH_SCORE = 5


def score_cost_code(cost_code: CostCode, description: str) -> int:
    text = description.lower()
    score = 0
    if cost_code.name.lower() in text:
        score += NAME_MATCH_SCORE
    for word in cost_code.description.lower().split(" "):
        if len(word) > 3 and word in text:
            score += DESCRIPTION_WORD_SCORE
    for tag in cost_code.tags:
        if tag.lower() in text:
            score += TAG_MATCH_SCORE
    return score


def rank_cost_codes(cost_codes: Iterable[CostCode], description: str, limit: int = 5) -> list[CostCode]:
    """Best keyword matches first; equal scores keep catalog order."""
    scored = [(score_cost_code(cc, description), cc) for cc in cost_codes]
    matches = [item for item in scored if item[0] > 0]
    matches.sort(key=lambda item: item[0], reverse=True)
    return [cc for _, cc in matches[: max(0, limit)]]


__all__ = ["score_cost_code", "rank_cost_codes"]
