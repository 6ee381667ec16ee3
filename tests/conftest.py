"""
Pytest configuration and shared fixtures.
"""

import os
from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from recruitment_pipeline.schemas.job_application import ApplicationRecord
from recruitment_pipeline.services.application_store import InMemoryApplicationStore


_ids = count(1)
_BASE_DATE = datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)


def build_record(raw_status, candidate_name=None, company="Acme Corp", record_id=None, **overrides) -> ApplicationRecord:
    """Build an ApplicationRecord with throwaway descriptive fields."""
    number = next(_ids)
    fields = {
        "id": record_id or f"app-{number}",
        "candidate_name": candidate_name or f"Candidate {number}",
        "company": company,
        "role_applied": "Backend Engineer",
        "location": "Bengaluru",
        "experience": "4 years",
        "raw_status": raw_status,
        "applied_on": _BASE_DATE + timedelta(days=number),
    }
    fields.update(overrides)
    return ApplicationRecord(**fields)


@pytest.fixture
def make_record():
    """Factory fixture for ApplicationRecord instances."""
    return build_record


@pytest.fixture
def store():
    """In-memory store preloaded with one candidate per interesting status."""
    return InMemoryApplicationStore(
        [
            build_record("L2", candidate_name="Isha Nair", record_id="isha"),
            build_record("HR Round", candidate_name="Rohan Gupta", record_id="rohan", company="Globex"),
            build_record("In Process", candidate_name="Aarav Mehta", record_id="aarav"),
            build_record("Screened Out", candidate_name="Arjun Pillai", record_id="arjun"),
            build_record("On Hold", candidate_name="Sara Khan", record_id="sara", company="Globex"),
        ]
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "db: requires database")
    config.addinivalue_line("markers", "server: requires running HTTP server")


def pytest_collection_modifyitems(config, items):
    run_db = os.environ.get("RUN_DB_TESTS") == "1"
    run_server = os.environ.get("RUN_SERVER_TESTS") == "1"

    skip_db = pytest.mark.skip(reason="db tests skipped by default; set RUN_DB_TESTS=1 to enable")
    skip_server = pytest.mark.skip(reason="server tests skipped by default; set RUN_SERVER_TESTS=1 to enable")

    for item in items:
        if "db" in item.keywords and not run_db:
            item.add_marker(skip_db)
        if "server" in item.keywords and not run_server:
            item.add_marker(skip_server)
