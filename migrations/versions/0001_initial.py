"""term schedule tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('term',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('academic_year', sa.String(20), nullable=False),
        sa.Column('semester', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.UniqueConstraint('academic_year', 'semester', name='uq_term_year_semester'),
    )

    op.create_table('program',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(50), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index('ix_program_code', 'program', ['code'], unique=True)

    op.create_table('course',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(50), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('lec_hours', sa.Float(), nullable=False, server_default='0'),
        sa.Column('lab_hours', sa.Float(), nullable=False, server_default='0'),
        sa.Column('units', sa.Integer(), nullable=True),
    )
    op.create_index('ix_course_code', 'course', ['code'], unique=True)

    op.create_table('faculty',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True, unique=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
    )

    op.create_table('room',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(50), nullable=False, unique=True),
        sa.Column('capacity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
    )

    op.create_table('course_assignment',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('program_id', sa.Integer(), sa.ForeignKey('program.id', ondelete='CASCADE'), nullable=False),
        sa.Column('year_level', sa.Integer(), nullable=False),
        sa.Column('semester', sa.Integer(), nullable=False),
        sa.Column('course_id', sa.Integer(), sa.ForeignKey('course.id', ondelete='CASCADE'), nullable=False),
        sa.UniqueConstraint('program_id', 'year_level', 'semester', 'course_id', name='uq_course_assignment'),
    )
    op.create_index('ix_course_assignment_program_year', 'course_assignment',
                    ['program_id', 'year_level', 'semester'])

    op.create_table('section',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('term_id', sa.Integer(), sa.ForeignKey('term.id', ondelete='CASCADE'), nullable=False),
        sa.Column('program_id', sa.Integer(), sa.ForeignKey('program.id', ondelete='CASCADE'), nullable=False),
        sa.Column('year_level', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(50), nullable=False),
        sa.UniqueConstraint('term_id', 'program_id', 'year_level', 'name',
                            name='uq_section_term_program_year_name'),
    )
    op.create_index('ix_section_term_id', 'section', ['term_id'])

    op.create_table('section_course',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('section_id', sa.Integer(), sa.ForeignKey('section.id', ondelete='CASCADE'), nullable=False),
        sa.Column('course_assignment_id', sa.Integer(),
                  sa.ForeignKey('course_assignment.id', ondelete='CASCADE'), nullable=False),
        sa.Column('is_copy', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_section_course_section_id', 'section_course', ['section_id'])

    op.create_table('schedule',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('section_course_id', sa.Integer(),
                  sa.ForeignKey('section_course.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('day', sa.String(10), nullable=True),
        sa.Column('start_time', sa.Time(), nullable=True),
        sa.Column('end_time', sa.Time(), nullable=True),
        sa.Column('faculty_id', sa.Integer(), sa.ForeignKey('faculty.id', ondelete='SET NULL'), nullable=True),
        sa.Column('room_id', sa.Integer(), sa.ForeignKey('room.id', ondelete='SET NULL'), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_schedule_faculty_id', 'schedule', ['faculty_id'])
    op.create_index('ix_schedule_room_id', 'schedule', ['room_id'])

    op.create_table('preference',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('term_id', sa.Integer(), sa.ForeignKey('term.id', ondelete='CASCADE'), nullable=False),
        sa.Column('faculty_id', sa.Integer(), sa.ForeignKey('faculty.id', ondelete='CASCADE'), nullable=False),
        sa.Column('course_assignment_id', sa.Integer(),
                  sa.ForeignKey('course_assignment.id', ondelete='CASCADE'), nullable=False),
        sa.Column('preferred_days', sa.JSON(), nullable=True),
        sa.Column('submitted_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('term_id', 'faculty_id', 'course_assignment_id',
                            name='uq_preference_term_faculty_course'),
    )
    op.create_index('ix_preference_term_id', 'preference', ['term_id'])

def downgrade():
    op.drop_index('ix_preference_term_id', table_name='preference')
    op.drop_table('preference')
    op.drop_index('ix_schedule_room_id', table_name='schedule')
    op.drop_index('ix_schedule_faculty_id', table_name='schedule')
    op.drop_table('schedule')
    op.drop_index('ix_section_course_section_id', table_name='section_course')
    op.drop_table('section_course')
    op.drop_index('ix_section_term_id', table_name='section')
    op.drop_table('section')
    op.drop_index('ix_course_assignment_program_year', table_name='course_assignment')
    op.drop_table('course_assignment')
    op.drop_table('room')
    op.drop_table('faculty')
    op.drop_index('ix_course_code', table_name='course')
    op.drop_table('course')
    op.drop_index('ix_program_code', table_name='program')
    op.drop_table('program')
    op.drop_table('term')
