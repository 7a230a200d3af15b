"""initial schema: employees and bookings

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('employees',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=32), nullable=False, server_default='employee'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_employees_id', 'employees', ['id'])
    op.create_index('ix_employees_email', 'employees', ['email'])
    op.create_table('bookings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('lead_id', sa.Integer(), nullable=True),
        sa.Column('customer', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('email', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('package_id', sa.Integer(), nullable=True),
        sa.Column('package_name', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('destination', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('travelers', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='Pending'),
        sa.Column('payment_status', sa.String(length=32), nullable=True, server_default='Pending'),
        sa.Column('payment_method', sa.String(length=64), nullable=True),
        sa.Column('payment_date', sa.DateTime(), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('transaction_id', sa.String(length=128), nullable=True),
        sa.Column('payment_link_id', sa.String(length=128), nullable=True),
        sa.Column('payment_link_url', sa.String(length=512), nullable=True),
        sa.Column('assigned_agent', sa.String(length=255), nullable=True),
        sa.Column('itinerary_details', sa.Text(), nullable=True),
        sa.Column('travel_date', sa.Date(), nullable=True),
        sa.Column('booking_date', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_bookings_lead_id', 'bookings', ['lead_id'])
    op.create_index('ix_bookings_email', 'bookings', ['email'])
    op.create_index('ix_bookings_destination', 'bookings', ['destination'])
    op.create_index('ix_bookings_payment_link_id', 'bookings', ['payment_link_id'])

def downgrade():
    op.drop_index('ix_bookings_payment_link_id', table_name='bookings')
    op.drop_index('ix_bookings_destination', table_name='bookings')
    op.drop_index('ix_bookings_email', table_name='bookings')
    op.drop_index('ix_bookings_lead_id', table_name='bookings')
    op.drop_table('bookings')
    op.drop_index('ix_employees_email', table_name='employees')
    op.drop_index('ix_employees_id', table_name='employees')
    op.drop_table('employees')
