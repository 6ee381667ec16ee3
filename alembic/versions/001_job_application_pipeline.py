"""Create job application and pipeline status change tables

Revision ID: 001_job_application_pipeline
Revises: 
Create Date: 2026-10-18 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '001_job_application_pipeline'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Creates:
    1. job_application with the free-form status column
    2. pipeline_status_change audit table
    3. A lower(company) index for the client pipeline lookup
    """
    op.create_table(
        'job_application',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('candidate_name', sa.String(255), nullable=False),
        sa.Column('candidate_email', sa.String(255), nullable=True),
        sa.Column('company', sa.String(255), nullable=False),
        sa.Column('role_applied', sa.String(255), nullable=False),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('experience', sa.String(100), nullable=True),
        sa.Column('status', sa.Text(), nullable=False, server_default='In Process'),
        sa.Column('source', sa.String(50), nullable=False, server_default='job_board'),
        sa.Column('applied_on', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    
    op.create_index(
        'ix_job_application_company_lower',
        'job_application',
        [sa.text('lower(company)')],
    )
    
    op.create_table(
        'pipeline_status_change',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            'application_id',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('job_application.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('previous_status', sa.Text(), nullable=True),
        sa.Column('new_status', sa.Text(), nullable=False),
        sa.Column('action', sa.String(20), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('actor', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    
    op.create_index(
        'ix_pipeline_status_change_application_id',
        'pipeline_status_change',
        ['application_id'],
    )


def downgrade() -> None:
    op.drop_index('ix_pipeline_status_change_application_id', table_name='pipeline_status_change')
    op.drop_table('pipeline_status_change')
    op.drop_index('ix_job_application_company_lower', table_name='job_application')
    op.drop_table('job_application')
