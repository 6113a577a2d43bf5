"""Initial exam sheet schema

Revision ID: 001
Revises:
Create Date: 2026-01-28 12:04:08.000000

The registry tables (users, licenses, enrollments, lessons) belong to the
school management system and are expected to exist already; only the
evaluation tables are created here.
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Create exam_templates table
    op.create_table(
        'exam_templates',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('license_id', sa.Integer(), nullable=False),
        sa.Column('max_points', sa.Integer(), nullable=False),
        sa.CheckConstraint('max_points >= 0', name='ck_exam_templates_max_points_non_negative'),
        sa.ForeignKeyConstraint(['license_id'], ['licenses.id'],
                                name='fk_exam_templates_license_id_licenses'),
        sa.PrimaryKeyConstraint('id', name='pk_exam_templates'),
        sa.UniqueConstraint('license_id', name='uq_exam_templates_license_id'),
    )

    # Create exam_template_items table
    op.create_table(
        'exam_template_items',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('template_id', sa.Integer(), nullable=False),
        sa.Column('description', sa.String(500), nullable=False),
        sa.Column('penalty_points', sa.Integer(), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.CheckConstraint('penalty_points >= 0',
                           name='ck_exam_template_items_penalty_points_non_negative'),
        sa.CheckConstraint('order_index >= 1', name='ck_exam_template_items_order_index_positive'),
        sa.ForeignKeyConstraint(['template_id'], ['exam_templates.id'], ondelete='CASCADE',
                                name='fk_exam_template_items_template_id_exam_templates'),
        sa.PrimaryKeyConstraint('id', name='pk_exam_template_items'),
        sa.UniqueConstraint('template_id', 'description',
                            name='uq_exam_template_items_template_id_description'),
    )
    op.create_index('ix_exam_template_items_template_id', 'exam_template_items', ['template_id'])

    # Create evaluations table; one row per lesson
    op.create_table(
        'evaluations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('lesson_id', sa.Integer(), nullable=False),
        sa.Column('template_id', sa.Integer(), nullable=False),
        sa.Column('mistakes_json', sa.Text(), nullable=False),
        sa.Column('total_points', sa.Integer(), nullable=True),
        sa.Column('result', sa.String(10), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('finalized_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['lesson_id'], ['lessons.id'], ondelete='CASCADE',
                                name='fk_evaluations_lesson_id_lessons'),
        sa.ForeignKeyConstraint(['template_id'], ['exam_templates.id'],
                                name='fk_evaluations_template_id_exam_templates'),
        sa.PrimaryKeyConstraint('id', name='pk_evaluations'),
        sa.UniqueConstraint('lesson_id', name='uq_evaluations_lesson_id'),
    )
    op.create_index('ix_evaluations_template_id', 'evaluations', ['template_id'])


def downgrade():
    op.drop_index('ix_evaluations_template_id', table_name='evaluations')
    op.drop_table('evaluations')
    op.drop_index('ix_exam_template_items_template_id', table_name='exam_template_items')
    op.drop_table('exam_template_items')
    op.drop_table('exam_templates')
