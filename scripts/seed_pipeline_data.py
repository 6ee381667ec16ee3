"""
Seed script to create demo job applications across the pipeline.

Usage:
    python scripts/seed_pipeline_data.py
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path so we can import recruitment_pipeline
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select, func

from recruitment_pipeline.db.session import AsyncSessionLocal
from recruitment_pipeline.models.job_application import JobApplication
from recruitment_pipeline.schemas.job_application import JobApplicationCreate
from recruitment_pipeline.services.job_application_service import JobApplicationService
from recruitment_pipeline.services.pipeline_aggregator import aggregate


DEMO_APPLICATIONS = [
    ("Aarav Mehta", "Acme Corp", "Backend Engineer", "Bengaluru", "4 years", "In Process"),
    ("Diya Sharma", "Acme Corp", "Backend Engineer", "Pune", "6 years", "Shortlisted"),
    ("Kabir Rao", "Acme Corp", "Data Analyst", "Hyderabad", "2 years", "Interview Scheduled"),
    ("Isha Nair", "Acme Corp", "Data Analyst", "Chennai", "3 years", "L2"),
    ("Rohan Gupta", "Globex", "Product Manager", "Gurugram", "8 years", "HR Round"),
    ("Meera Iyer", "Globex", "Product Manager", "Mumbai", "7 years", "Selected"),
    ("Vikram Singh", "Globex", "QA Engineer", "Noida", "5 years", "Joined"),
    ("Ananya Das", "Globex", "QA Engineer", "Kolkata", "1 year", "Declined"),
    ("Arjun Pillai", "Initech", "DevOps Engineer", "Kochi", "5 years", "Screened Out"),
    ("Sara Khan", "Initech", "DevOps Engineer", "Delhi", "3 years", "On Hold"),
]


async def seed_pipeline_data():
    """Create demo applications unless the table already has rows."""
    
    async with AsyncSessionLocal() as db:
        existing = (await db.execute(select(func.count(JobApplication.id)))).scalar_one()
        if existing:
            print(f"[OK] Found {existing} existing application(s), skipping seed")
        else:
            service = JobApplicationService(db)
            for name, company, role, location, experience, raw_status in DEMO_APPLICATIONS:
                await service.create_application(
                    JobApplicationCreate(
                        candidate_name=name,
                        company=company,
                        role_applied=role,
                        location=location,
                        experience=experience,
                        raw_status=raw_status,
                    )
                )
            await db.commit()
            print(f"[OK] Created {len(DEMO_APPLICATIONS)} application(s)")
        
        snapshot = aggregate(await JobApplicationService(db).fetch_applications())
        for stage, count in snapshot.counts.items():
            print(f"  {stage.value:<12} {count}")
        print(f"  unmapped     {len(snapshot.unmapped)}")


if __name__ == "__main__":
    asyncio.run(seed_pipeline_data())
