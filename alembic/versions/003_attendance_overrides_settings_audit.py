"""Attendance override fields, settings and audit logs

Revision ID: 003_overrides_settings_audit
Revises: 002_user_roles_invitations
Create Date: 2025-11-30

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '003_overrides_settings_audit'
down_revision: Union[str, None] = '002_user_roles_invitations'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

OVERRIDE_COLUMNS = ('modified_by', 'modified_at', 'original_status', 'modification_reason')


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    existing = inspector.get_table_names()

    attendance_columns = {c['name'] for c in inspector.get_columns('attendance')}
    if 'modified_by' not in attendance_columns:
        with op.batch_alter_table('attendance') as batch_op:
            batch_op.add_column(sa.Column('modified_by', sa.Integer(), nullable=True))
            batch_op.add_column(sa.Column('modified_at', sa.DateTime(timezone=True), nullable=True))
            batch_op.add_column(sa.Column('original_status', sa.String(), nullable=True))
            batch_op.add_column(sa.Column('modification_reason', sa.Text(), nullable=True))
            batch_op.create_foreign_key(
                'fk_attendance_modified_by_users', 'users', ['modified_by'], ['id']
            )

    if 'settings' not in existing:
        op.create_table(
            'settings',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('key', sa.String(), nullable=False),
            sa.Column('value', sa.JSON(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_settings_id'), 'settings', ['id'], unique=False)
        op.create_index(op.f('ix_settings_key'), 'settings', ['key'], unique=True)
        # Seed the default threshold (9:15)
        settings_table = sa.table('settings', sa.column('key', sa.String), sa.column('value', sa.JSON))
        op.bulk_insert(settings_table, [{'key': 'late_threshold', 'value': {'hours': 9, 'minutes': 15}}])

    if 'audit_logs' not in existing:
        op.create_table(
            'audit_logs',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('actor_id', sa.Integer(), nullable=False),
            sa.Column('action', sa.String(), nullable=False),
            sa.Column('entity_type', sa.String(), nullable=False),
            sa.Column('entity_id', sa.Integer(), nullable=True),
            sa.Column('meta_json', sa.JSON(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.ForeignKeyConstraint(['actor_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_audit_logs_id'), 'audit_logs', ['id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_audit_logs_id'), table_name='audit_logs')
    op.drop_table('audit_logs')
    op.drop_index(op.f('ix_settings_key'), table_name='settings')
    op.drop_index(op.f('ix_settings_id'), table_name='settings')
    op.drop_table('settings')
    with op.batch_alter_table('attendance') as batch_op:
        batch_op.drop_constraint('fk_attendance_modified_by_users', type_='foreignkey')
        for column in reversed(OVERRIDE_COLUMNS):
            batch_op.drop_column(column)
