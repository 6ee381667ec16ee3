import pytest

from recruitment_pipeline.core.stages import Stage
from recruitment_pipeline.utils.status_canonicalizer import (
    STATUS_SYNONYMS,
    canonicalize,
    is_known_status,
    normalize_status,
)

pytestmark = pytest.mark.unit


SYNONYM_TABLE = [
    ("In Process", Stage.SOURCED),
    ("In-Process", Stage.SOURCED),
    ("Applied", Stage.SOURCED),
    ("Shortlisted", Stage.SHORTLISTED),
    ("Intro Call", Stage.INTRO_CALL),
    ("Assignment", Stage.ASSIGNMENT),
    ("L1", Stage.L1),
    ("Interview Scheduled", Stage.L1),
    ("L2", Stage.L2),
    ("L3", Stage.L3),
    ("Final Round", Stage.FINAL_ROUND),
    ("HR Round", Stage.HR_ROUND),
    ("Offer Stage", Stage.OFFER_STAGE),
    ("Selected", Stage.OFFER_STAGE),
    ("Closure", Stage.CLOSURE),
    ("Joined", Stage.CLOSURE),
    ("Offer Drop", Stage.OFFER_DROP),
    ("Declined", Stage.OFFER_DROP),
    ("Rejected", Stage.REJECTED),
]


@pytest.mark.parametrize("raw_status,expected", SYNONYM_TABLE)
def test_documented_synonyms(raw_status, expected):
    assert canonicalize(raw_status) is expected


def test_every_table_entry_maps_to_its_own_stage():
    for stage, spellings in STATUS_SYNONYMS.items():
        for spelling in spellings:
            assert canonicalize(spelling) is stage, spelling


@pytest.mark.parametrize(
    "raw_status,expected",
    [
        ("  interview scheduled ", Stage.L1),
        ("INTERVIEW SCHEDULED", Stage.L1),
        ("Final   Round", Stage.FINAL_ROUND),
        ("HR_ROUND", Stage.HR_ROUND),
        ("offer_stage", Stage.OFFER_STAGE),
        ("in process", Stage.SOURCED),
        ("IN_PROCESS", Stage.SOURCED),
        ("intro-call", Stage.INTRO_CALL),
        ("New", Stage.SOURCED),
        ("Closed", Stage.CLOSURE),
    ],
)
def test_case_whitespace_and_separator_variants(raw_status, expected):
    assert canonicalize(raw_status) is expected


@pytest.mark.parametrize("raw_status", ["Screened Out", "screened_out", "Archived"])
def test_excluded_statuses_are_not_pipeline_stages(raw_status):
    assert canonicalize(raw_status) in (Stage.SCREENED_OUT, Stage.ARCHIVED)


@pytest.mark.parametrize("raw_status", ["garbled-xyz", "On Hold", "", "   ", None, 42, ["L1"]])
def test_unknown_values_are_unmapped(raw_status):
    assert canonicalize(raw_status) is Stage.UNMAPPED
    assert not is_known_status(raw_status)


def test_unknown_status_is_never_sourced():
    # Unknown statuses used to fall through to Sourced
    assert canonicalize("Reviewed") is not Stage.SOURCED


def test_normalize_status():
    assert normalize_status("  Offer__Stage ") == "offer stage"
    assert normalize_status("In-Process") == normalize_status("in process")


def test_synonym_spellings_do_not_collide():
    seen = {}
    for stage, spellings in STATUS_SYNONYMS.items():
        for spelling in spellings:
            key = normalize_status(spelling)
            assert seen.setdefault(key, stage) is stage
