"""Create interview scheduling tables

Revision ID: 001_interview_engine
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_interview_engine'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(with_updated: bool = True) -> list:
    columns = [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]
    if with_updated:
        columns.append(
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())
        )
    return columns


def upgrade() -> None:
    """Create campaign, candidate, interview, question bank and activity tables."""
    op.create_table(
        'job_campaigns',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('company_id', sa.Uuid(), nullable=False),
        sa.Column('company_name', sa.String(length=255), nullable=False),
        sa.Column('campaign_name', sa.String(length=255), nullable=True),
        sa.Column('job_title', sa.String(length=255), nullable=False),
        sa.Column('job_description', sa.Text(), nullable=True),
        sa.Column('auto_schedule_config', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_job_campaigns_company_id', 'job_campaigns', ['company_id'])

    op.create_table(
        'interview_round_configs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('campaign_id', sa.Uuid(), nullable=False),
        sa.Column('round_number', sa.Integer(), nullable=False),
        sa.Column('round_name', sa.String(length=255), nullable=False),
        sa.Column('interview_type', sa.String(length=50), nullable=False),
        sa.Column('time_limit_minutes', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('difficulty', sa.String(length=20), nullable=True),
        sa.Column('question_count', sa.Integer(), nullable=False, server_default='5'),
        sa.Column('question_source_id', sa.String(length=64), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['campaign_id'], ['job_campaigns.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('campaign_id', 'round_number', name='uq_round_campaign_number'),
    )
    op.create_index('ix_interview_round_configs_campaign_id', 'interview_round_configs', ['campaign_id'])

    op.create_table(
        'candidates',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('campaign_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=50), nullable=False, server_default='applied'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['campaign_id'], ['job_campaigns.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_candidates_campaign_id', 'candidates', ['campaign_id'])
    op.create_index('ix_candidates_email', 'candidates', ['email'])

    op.create_table(
        'interview_instances',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('kind', sa.String(length=50), nullable=False, server_default='campaign'),
        sa.Column('candidate_id', sa.Uuid(), nullable=False),
        sa.Column('campaign_id', sa.Uuid(), nullable=True),
        sa.Column('round_config_id', sa.Uuid(), nullable=True),
        sa.Column('interview_type', sa.String(length=50), nullable=False),
        sa.Column('status', sa.String(length=50), nullable=False, server_default='scheduled'),
        sa.Column('title', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('time_limit_minutes', sa.Integer(), nullable=True),
        sa.Column('scheduled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('timezone', sa.String(length=50), nullable=False, server_default='UTC'),
        sa.Column('access_link', sa.String(length=2048), nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('duration_seconds', sa.Integer(), nullable=True),
        sa.Column('score', sa.Integer(), nullable=True),
        sa.Column('max_score', sa.Integer(), nullable=True),
        sa.Column('passed', sa.Boolean(), nullable=True),
        sa.Column('answers_payload', sa.JSON(), nullable=True),
        sa.Column('question_snapshot', sa.JSON(), nullable=True),
        sa.Column('superseded_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['candidate_id'], ['candidates.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['campaign_id'], ['job_campaigns.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['round_config_id'], ['interview_round_configs.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_interview_instances_candidate_id', 'interview_instances', ['candidate_id'])
    op.create_index('ix_interview_instances_campaign_id', 'interview_instances', ['campaign_id'])
    op.create_index('ix_interview_instances_status', 'interview_instances', ['status'])
    op.create_index('idx_interview_candidate_status', 'interview_instances', ['candidate_id', 'status'])
    # At most one live instance per (candidate, campaign, round)
    op.create_index(
        'uq_interview_candidate_campaign_round',
        'interview_instances',
        ['candidate_id', 'campaign_id', 'round_config_id'],
        unique=True,
        postgresql_where=sa.text('superseded_at IS NULL'),
    )

    op.create_table(
        'question_banks',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('company_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(with_updated=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_question_banks_company_id', 'question_banks', ['company_id'])

    op.create_table(
        'questions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('bank_id', sa.Uuid(), nullable=False),
        sa.Column('question_type', sa.String(length=50), nullable=False),
        sa.Column('difficulty', sa.String(length=20), nullable=True),
        sa.Column('payload', sa.JSON(), nullable=False),
        *_timestamps(with_updated=False),
        sa.ForeignKeyConstraint(['bank_id'], ['question_banks.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'idx_questions_bank_type_difficulty', 'questions', ['bank_id', 'question_type', 'difficulty']
    )

    op.create_table(
        'auto_schedule_activities',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('candidate_id', sa.Uuid(), nullable=False),
        sa.Column('campaign_id', sa.Uuid(), nullable=False),
        sa.Column('action', sa.String(length=100), nullable=False),
        sa.Column('success', sa.Boolean(), nullable=False),
        sa.Column('details', sa.JSON(), nullable=True),
        *_timestamps(with_updated=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_auto_schedule_activities_candidate_id', 'auto_schedule_activities', ['candidate_id'])
    op.create_index('ix_auto_schedule_activities_campaign_id', 'auto_schedule_activities', ['campaign_id'])
    op.create_index('ix_auto_schedule_activities_action', 'auto_schedule_activities', ['action'])
    op.create_index('ix_auto_schedule_activities_created_at', 'auto_schedule_activities', ['created_at'])


def downgrade() -> None:
    """Drop interview scheduling tables."""
    op.drop_table('auto_schedule_activities')
    op.drop_table('questions')
    op.drop_table('question_banks')
    op.drop_table('interview_instances')
    op.drop_table('candidates')
    op.drop_table('interview_round_configs')
    op.drop_table('job_campaigns')
