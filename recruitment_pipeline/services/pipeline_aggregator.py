"""
Pipeline aggregation.

Turns a collection of job applications into per-stage buckets and counts
for the client and admin dashboards. Pure and synchronous: every call works
on its own local structures, so concurrent callers never share state.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from recruitment_pipeline.core.stages import Stage, is_excluded, stages
from recruitment_pipeline.schemas.job_application import ApplicationRecord
from recruitment_pipeline.utils.status_canonicalizer import canonicalize

logger = logging.getLogger(__name__)


StageMembership = Dict[Stage, List[ApplicationRecord]]
StageCounts = Dict[Stage, int]


@dataclass
class PipelineSnapshot:
    """Result of one aggregation pass."""

    membership: StageMembership
    counts: StageCounts
    unmapped: List[ApplicationRecord] = field(default_factory=list)
    excluded_count: int = 0

    @property
    def total(self) -> int:
        """Number of applications placed in a pipeline stage."""
        return sum(self.counts.values())

    def stage_of(self, application_id: str) -> Optional[Stage]:
        """Return the stage holding an application, Stage.UNMAPPED, or None."""
        for stage, bucket in self.membership.items():
            if any(record.id == application_id for record in bucket):
                return stage
        if any(record.id == application_id for record in self.unmapped):
            return Stage.UNMAPPED
        return None


def aggregate(records: Iterable[ApplicationRecord]) -> PipelineSnapshot:
    """
    Classify applications into pipeline stages.

    Steps:
    1. Seed an empty bucket for every registry stage, so absent stages
       report a count of 0.
    2. Canonicalize each record's raw status. Archived and Screened Out
       records are skipped; unknown statuses go to the unmapped list.
    3. Append the rest to their stage bucket in input order.

    Counts come from the same pass as the buckets.

    Args:
        records: Applications to classify; may be empty

    Returns:
        PipelineSnapshot with membership, counts and the unmapped records
    """
    if records is None:
        raise TypeError("records must be a collection, not None")

    membership: StageMembership = {stage: [] for stage in stages()}
    unmapped: List[ApplicationRecord] = []
    excluded_count = 0

    for record in records:
        stage = canonicalize(record.raw_status)
        if is_excluded(stage):
            excluded_count += 1
            continue
        if stage is Stage.UNMAPPED:
            unmapped.append(record)
            continue
        membership[stage].append(record)

    counts: StageCounts = {stage: len(bucket) for stage, bucket in membership.items()}

    if unmapped:
        distinct = sorted({repr(record.raw_status) for record in unmapped})
        logger.warning(
            "Pipeline aggregation found %d application(s) with unmapped status: %s",
            len(unmapped),
            ", ".join(distinct),
        )
    logger.debug(
        "Aggregated %d application(s) into pipeline (%d excluded, %d unmapped)",
        sum(counts.values()),
        excluded_count,
        len(unmapped),
    )

    return PipelineSnapshot(
        membership=membership,
        counts=counts,
        unmapped=unmapped,
        excluded_count=excluded_count,
    )
