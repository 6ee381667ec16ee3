"""Status canonicalization for job application pipelines."""

from __future__ import annotations

import re
from typing import Any, Dict, FrozenSet, Mapping

from recruitment_pipeline.core.stages import Stage


# Raw status spellings seen from recruiters and system events, grouped by
# the stage they belong to. Lookups go through normalize_status, so case and
# separator variants of these do not need their own entries.
STATUS_SYNONYMS: Mapping[Stage, FrozenSet[str]] = {
    Stage.SOURCED: frozenset({"In Process", "In-Process", "Applied", "New", "Sourced"}),
    Stage.SHORTLISTED: frozenset({"Shortlisted"}),
    Stage.INTRO_CALL: frozenset({"Intro Call"}),
    Stage.ASSIGNMENT: frozenset({"Assignment"}),
    Stage.L1: frozenset({"L1", "Interview Scheduled"}),
    Stage.L2: frozenset({"L2"}),
    Stage.L3: frozenset({"L3"}),
    Stage.FINAL_ROUND: frozenset({"Final Round"}),
    Stage.HR_ROUND: frozenset({"HR Round"}),
    Stage.OFFER_STAGE: frozenset({"Offer Stage", "Selected"}),
    Stage.CLOSURE: frozenset({"Closure", "Joined", "Closed"}),
    Stage.OFFER_DROP: frozenset({"Offer Drop", "Declined"}),
    Stage.REJECTED: frozenset({"Rejected"}),
    Stage.SCREENED_OUT: frozenset({"Screened Out"}),
    Stage.ARCHIVED: frozenset({"Archived"}),
}

_SEPARATORS = re.compile(r"[\s_\-]+")


def normalize_status(raw_status: str) -> str:
    """Return the lookup key for a raw status.

    Rules:
    - Trim surrounding whitespace and casefold.
    - Treat runs of spaces, underscores and hyphens as a single space.
    """
    return _SEPARATORS.sub(" ", raw_status.strip()).casefold().strip()


def _build_lookup(synonyms: Mapping[Stage, FrozenSet[str]]) -> Dict[str, Stage]:
    lookup: Dict[str, Stage] = {}
    for stage, spellings in synonyms.items():
        for spelling in spellings:
            key = normalize_status(spelling)
            existing = lookup.get(key)
            if existing is not None and existing is not stage:
                raise ValueError(f"status synonym {spelling!r} maps to both {existing.value} and {stage.value}")
            lookup[key] = stage
    return lookup


_LOOKUP: Dict[str, Stage] = _build_lookup(STATUS_SYNONYMS)


def canonicalize(raw_status: Any) -> Stage:
    """Map a raw status string onto exactly one Stage.

    Unknown, empty or non-string values map to Stage.UNMAPPED rather than to
    a real pipeline stage. Never raises.
    """
    if not isinstance(raw_status, str):
        return Stage.UNMAPPED
    key = normalize_status(raw_status)
    if not key:
        return Stage.UNMAPPED
    return _LOOKUP.get(key, Stage.UNMAPPED)


def is_known_status(raw_status: Any) -> bool:
    return canonicalize(raw_status) is not Stage.UNMAPPED
