"""
Pipeline stage vocabulary.

Defines the closed set of stages a job application can be classified into,
plus the registry the dashboards use to lay out their columns.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple


class Stage(str, Enum):
    """Every classification the status canonicalizer can produce.

    The first thirteen members are the displayable pipeline stages, in
    display order. The remaining members are sentinels that never get a
    pipeline bucket.
    """

    SOURCED = "Sourced"
    SHORTLISTED = "Shortlisted"
    INTRO_CALL = "IntroCall"
    ASSIGNMENT = "Assignment"
    L1 = "L1"
    L2 = "L2"
    L3 = "L3"
    FINAL_ROUND = "FinalRound"
    HR_ROUND = "HRRound"
    OFFER_STAGE = "OfferStage"
    CLOSURE = "Closure"
    OFFER_DROP = "OfferDrop"
    REJECTED = "Rejected"

    # Sentinels
    UNMAPPED = "Unmapped"
    ARCHIVED = "Archived"
    SCREENED_OUT = "ScreenedOut"


class StageTier(str, Enum):
    """Colour tier a dashboard uses when rendering a stage."""

    EARLY = "early"
    INTERVIEW = "interview"
    OFFER = "offer"
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class StageMetadata:
    """Display metadata for a pipeline stage."""

    stage: Stage
    label: str
    display_order: int
    tier: StageTier


# Tracked upstream, never shown in the pipeline and never counted.
EXCLUDED_STAGES = frozenset({Stage.ARCHIVED, Stage.SCREENED_OUT})

_STAGE_TABLE: Tuple[Tuple[Stage, str, StageTier], ...] = (
    (Stage.SOURCED, "Sourced", StageTier.EARLY),
    (Stage.SHORTLISTED, "Shortlisted", StageTier.EARLY),
    (Stage.INTRO_CALL, "Intro Call", StageTier.EARLY),
    (Stage.ASSIGNMENT, "Assignment", StageTier.EARLY),
    (Stage.L1, "L1", StageTier.INTERVIEW),
    (Stage.L2, "L2", StageTier.INTERVIEW),
    (Stage.L3, "L3", StageTier.INTERVIEW),
    (Stage.FINAL_ROUND, "Final Round", StageTier.INTERVIEW),
    (Stage.HR_ROUND, "HR Round", StageTier.INTERVIEW),
    (Stage.OFFER_STAGE, "Offer Stage", StageTier.OFFER),
    (Stage.CLOSURE, "Closure", StageTier.WON),
    (Stage.OFFER_DROP, "Offer Drop", StageTier.LOST),
    (Stage.REJECTED, "Rejected", StageTier.LOST),
)

_PIPELINE_STAGES: Tuple[Stage, ...] = tuple(row[0] for row in _STAGE_TABLE)

_METADATA: Dict[Stage, StageMetadata] = {
    stage: StageMetadata(stage=stage, label=label, display_order=index, tier=tier)
    for index, (stage, label, tier) in enumerate(_STAGE_TABLE)
}


def stages() -> List[Stage]:
    """Return the pipeline stages in display order."""
    return list(_PIPELINE_STAGES)


def metadata(stage: Stage) -> StageMetadata:
    """
    Return display metadata for a pipeline stage.
    
    Raises:
        KeyError: If the stage is a sentinel (Unmapped, Archived, ScreenedOut)
    """
    return _METADATA[stage]


def is_pipeline_stage(stage: Stage) -> bool:
    return stage in _METADATA


def is_excluded(stage: Stage) -> bool:
    return stage in EXCLUDED_STAGES
