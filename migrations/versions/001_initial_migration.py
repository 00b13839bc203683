"""Initial migration

Revision ID: 001
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create profiles table
    op.create_table('profiles',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='colaborador'),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_profiles_email'), 'profiles', ['email'], unique=True)

    # Create company_settings table (singleton row id='default')
    op.create_table('company_settings',
        sa.Column('id', sa.String(length=20), nullable=False),
        sa.Column('geofence_center_lat', sa.Float(), nullable=False),
        sa.Column('geofence_center_lng', sa.Float(), nullable=False),
        sa.Column('geofence_radius', sa.Integer(), nullable=False),
        sa.Column('tolerance_minutes', sa.Integer(), nullable=False, server_default='15'),
        sa.Column('photo_retention_days', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.CheckConstraint('geofence_radius > 0', name='ck_company_settings_radius_positive'),
        sa.PrimaryKeyConstraint('id')
    )

    # Create points table
    op.create_table('points',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('client_timestamp_local', sa.String(length=40), nullable=True),
        sa.Column('client_timestamp_utc', sa.String(length=40), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('accuracy_meters', sa.Float(), nullable=False),
        sa.Column('photo_reference', sa.String(length=500), nullable=False),
        sa.Column('fingerprint', sa.String(length=128), nullable=False),
        sa.Column('distance_meters', sa.Float(), nullable=False),
        sa.Column('within_geofence', sa.Boolean(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pendente'),
        sa.Column('reviewed_by', sa.String(length=36), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ),
        sa.ForeignKeyConstraint(['reviewed_by'], ['profiles.id'], ),
        sa.CheckConstraint("type IN ('entrada', 'saida', 'almoco', 'pausa')", name='ck_points_type'),
        sa.CheckConstraint("status IN ('pendente', 'aprovado', 'rejeitado')", name='ck_points_status'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'fingerprint', name='uix_point_user_fingerprint')
    )
    op.create_index(op.f('ix_points_user_id'), 'points', ['user_id'], unique=False)
    op.create_index(op.f('ix_points_timestamp'), 'points', ['timestamp'], unique=False)

    # Create audit_logs table
    op.create_table('audit_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('action', sa.String(length=50), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_audit_logs_id'), 'audit_logs', ['id'], unique=False)
    op.create_index(op.f('ix_audit_logs_user_id'), 'audit_logs', ['user_id'], unique=False)
    op.create_index(op.f('ix_audit_logs_action'), 'audit_logs', ['action'], unique=False)
    op.create_index(op.f('ix_audit_logs_timestamp'), 'audit_logs', ['timestamp'], unique=False)

    # Create absences table
    op.create_table('absences',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False, server_default='ferias'),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pendente'),
        sa.Column('reviewed_by', sa.String(length=36), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ),
        sa.ForeignKeyConstraint(['reviewed_by'], ['profiles.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_absences_user_id'), 'absences', ['user_id'], unique=False)

    # Create active_devices table
    op.create_table('active_devices',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('device_id', sa.String(length=128), nullable=False),
        sa.Column('device_model', sa.String(length=100), nullable=True),
        sa.Column('last_login', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('reviewed_by', sa.String(length=36), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ),
        sa.ForeignKeyConstraint(['reviewed_by'], ['profiles.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'device_id', name='uix_device_user')
    )
    op.create_index(op.f('ix_active_devices_user_id'), 'active_devices', ['user_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_active_devices_user_id'), table_name='active_devices')
    op.drop_table('active_devices')
    op.drop_index(op.f('ix_absences_user_id'), table_name='absences')
    op.drop_table('absences')
    op.drop_index(op.f('ix_audit_logs_timestamp'), table_name='audit_logs')
    op.drop_index(op.f('ix_audit_logs_action'), table_name='audit_logs')
    op.drop_index(op.f('ix_audit_logs_user_id'), table_name='audit_logs')
    op.drop_index(op.f('ix_audit_logs_id'), table_name='audit_logs')
    op.drop_table('audit_logs')
    op.drop_index(op.f('ix_points_timestamp'), table_name='points')
    op.drop_index(op.f('ix_points_user_id'), table_name='points')
    op.drop_table('points')
    op.drop_table('company_settings')
    op.drop_index(op.f('ix_profiles_email'), table_name='profiles')
    op.drop_table('profiles')
