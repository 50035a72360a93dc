"""initial enrollment schema

Revision ID: 5c1e9a7d2b40
Revises:
Create Date: 2026-10-18 09:12:44.318201

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1e9a7d2b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

role_enum = sa.Enum('STUDENT', 'INSTRUCTOR', 'ADMIN', name='roleenum')
course_level_enum = sa.Enum('BEGINNER', 'INTERMEDIATE', 'ADVANCED', 'ALL_LEVELS', name='courselevelenum')
course_status_enum = sa.Enum('DRAFT', 'PUBLISHED', 'ARCHIVED', name='coursestatusenum')
enrollment_status_enum = sa.Enum('ACTIVE', 'COMPLETED', 'CANCELLED', 'EXPIRED', name='enrollmentstatusenum')
payment_method_enum = sa.Enum('CREDIT_CARD', 'PAYPAL', 'STRIPE', 'BANK_TRANSFER', 'CRYPTO', name='paymentmethodenum')
payment_status_enum = sa.Enum('PENDING', 'COMPLETED', 'FAILED', 'REFUNDED', name='paymentstatusenum')
refund_status_enum = sa.Enum('NONE', 'PENDING', 'APPROVED', 'REJECTED', name='refundstatusenum')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', role_enum, nullable=False),
        sa.Column('avatar', sa.String(), nullable=True),
        sa.Column('bio', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_full_name'), 'users', ['full_name'], unique=False)

    op.create_table(
        'courses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('level', course_level_enum, nullable=False),
        sa.Column('thumbnail', sa.String(), nullable=True),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('status', course_status_enum, nullable=False),
        sa.Column('instructor_id', sa.Integer(), nullable=False),
        sa.Column('enrollment_count', sa.Integer(), nullable=False),
        sa.Column('rating_average', sa.Float(), nullable=False),
        sa.Column('rating_count', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('price >= 0', name='ck_course_price_non_negative'),
        sa.CheckConstraint('enrollment_count >= 0', name='ck_course_enrollment_count_non_negative'),
        sa.ForeignKeyConstraint(['instructor_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_courses_id'), 'courses', ['id'], unique=False)
    op.create_index(op.f('ix_courses_title'), 'courses', ['title'], unique=False)
    op.create_index(op.f('ix_courses_category'), 'courses', ['category'], unique=False)
    op.create_index(op.f('ix_courses_status'), 'courses', ['status'], unique=False)

    op.create_table(
        'lectures',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('course_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_lectures_id'), 'lectures', ['id'], unique=False)
    op.create_index(op.f('ix_lectures_course_id'), 'lectures', ['course_id'], unique=False)

    op.create_table(
        'course_reviews',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('course_id', sa.Integer(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_course_review_rating_range'),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id']),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'course_id', name='unique_user_course_review')
    )
    op.create_index(op.f('ix_course_reviews_id'), 'course_reviews', ['id'], unique=False)

    op.create_table(
        'enrollments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.Column('course_id', sa.Integer(), nullable=False),
        sa.Column('instructor_id', sa.Integer(), nullable=False),
        sa.Column('enrollment_date', sa.DateTime(), nullable=False),
        sa.Column('completion_date', sa.DateTime(), nullable=True),
        sa.Column('status', enrollment_status_enum, nullable=False),
        sa.Column('progress', sa.Integer(), nullable=False),
        sa.Column('last_accessed', sa.DateTime(), nullable=False),
        sa.Column('total_time_spent', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('certificate_issued', sa.Boolean(), nullable=False),
        sa.Column('certificate_issued_at', sa.DateTime(), nullable=True),
        sa.Column('certificate_id', sa.String(), nullable=True),
        sa.Column('certificate_download_url', sa.String(), nullable=True),
        sa.Column('payment_amount', sa.Float(), nullable=False),
        sa.Column('payment_currency', sa.String(length=3), nullable=False),
        sa.Column('payment_method', payment_method_enum, nullable=False),
        sa.Column('payment_transaction_id', sa.String(), nullable=False),
        sa.Column('payment_status', payment_status_enum, nullable=False),
        sa.Column('payment_paid_at', sa.DateTime(), nullable=True),
        sa.Column('rating_given', sa.Boolean(), nullable=False),
        sa.Column('rating_value', sa.Integer(), nullable=True),
        sa.Column('rating_review', sa.Text(), nullable=True),
        sa.Column('rating_reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('access_expiry', sa.DateTime(), nullable=True),
        sa.Column('is_lifetime', sa.Boolean(), nullable=False),
        sa.Column('refund_requested', sa.Boolean(), nullable=False),
        sa.Column('refund_reason', sa.String(), nullable=True),
        sa.Column('refund_status', refund_status_enum, nullable=False),
        sa.Column('refund_processed_at', sa.DateTime(), nullable=True),
        sa.Column('refund_amount', sa.Float(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.CheckConstraint('progress >= 0 AND progress <= 100', name='ck_enrollment_progress_range'),
        sa.CheckConstraint(
            'rating_value IS NULL OR (rating_value >= 1 AND rating_value <= 5)',
            name='ck_enrollment_rating_range'
        ),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id']),
        sa.ForeignKeyConstraint(['instructor_id'], ['users.id']),
        sa.ForeignKeyConstraint(['student_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('certificate_id'),
        sa.UniqueConstraint('student_id', 'course_id', name='unique_student_course_enrollment')
    )
    op.create_index(op.f('ix_enrollments_id'), 'enrollments', ['id'], unique=False)
    op.create_index('ix_enrollments_student_status', 'enrollments', ['student_id', 'status'], unique=False)
    op.create_index('ix_enrollments_course_status', 'enrollments', ['course_id', 'status'], unique=False)
    op.create_index('ix_enrollments_instructor', 'enrollments', ['instructor_id'], unique=False)
    op.create_index('ix_enrollments_enrollment_date', 'enrollments', ['enrollment_date'], unique=False)
    op.create_index('ix_enrollments_payment_status', 'enrollments', ['payment_status'], unique=False)

    op.create_table(
        'enrollment_completed_lectures',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('enrollment_id', sa.Integer(), nullable=False),
        sa.Column('lecture_id', sa.Integer(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=False),
        sa.Column('time_spent', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['enrollment_id'], ['enrollments.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('enrollment_id', 'lecture_id', name='unique_enrollment_lecture')
    )
    op.create_index(op.f('ix_enrollment_completed_lectures_id'), 'enrollment_completed_lectures', ['id'], unique=False)
    op.create_index(
        op.f('ix_enrollment_completed_lectures_enrollment_id'), 'enrollment_completed_lectures', ['enrollment_id'], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f('ix_enrollment_completed_lectures_enrollment_id'), table_name='enrollment_completed_lectures')
    op.drop_index(op.f('ix_enrollment_completed_lectures_id'), table_name='enrollment_completed_lectures')
    op.drop_table('enrollment_completed_lectures')

    op.drop_index('ix_enrollments_payment_status', table_name='enrollments')
    op.drop_index('ix_enrollments_enrollment_date', table_name='enrollments')
    op.drop_index('ix_enrollments_instructor', table_name='enrollments')
    op.drop_index('ix_enrollments_course_status', table_name='enrollments')
    op.drop_index('ix_enrollments_student_status', table_name='enrollments')
    op.drop_index(op.f('ix_enrollments_id'), table_name='enrollments')
    op.drop_table('enrollments')

    op.drop_index(op.f('ix_course_reviews_id'), table_name='course_reviews')
    op.drop_table('course_reviews')

    op.drop_index(op.f('ix_lectures_course_id'), table_name='lectures')
    op.drop_index(op.f('ix_lectures_id'), table_name='lectures')
    op.drop_table('lectures')

    op.drop_index(op.f('ix_courses_status'), table_name='courses')
    op.drop_index(op.f('ix_courses_category'), table_name='courses')
    op.drop_index(op.f('ix_courses_title'), table_name='courses')
    op.drop_index(op.f('ix_courses_id'), table_name='courses')
    op.drop_table('courses')

    op.drop_index(op.f('ix_users_full_name'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (
        refund_status_enum, payment_status_enum, payment_method_enum, enrollment_status_enum,
        course_status_enum, course_level_enum, role_enum,
    ):
        enum_type.drop(bind, checkfirst=True)
