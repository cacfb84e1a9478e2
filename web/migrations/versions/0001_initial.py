from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def table_exists(table_name):
    """Check if a table exists."""
    conn = op.get_bind()
    return table_name in inspect(conn).get_table_names()


def upgrade() -> None:
    if not table_exists('routes'):
        op.create_table(
            'routes',
            sa.Column('id', sa.String(length=64), primary_key=True),
            sa.Column('departure', sa.String(length=120), nullable=False),
            sa.Column('destination', sa.String(length=120), nullable=False),
            sa.Column('departure_time', sa.String(length=32), nullable=False),
            sa.Column('price', sa.Numeric(10, 2), nullable=False),
            sa.Column('total_seats', sa.Integer(), nullable=False),
            sa.Column('available_seats', sa.Integer(), nullable=False),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
            sa.CheckConstraint('price >= 0', name='ck_routes_price_non_negative'),
            sa.CheckConstraint('total_seats > 0', name='ck_routes_total_positive'),
            sa.CheckConstraint('available_seats >= 0', name='ck_routes_available_non_negative'),
            sa.CheckConstraint('available_seats <= total_seats', name='ck_routes_available_lte_total'),
        )

    if not table_exists('bookings'):
        op.create_table(
            'bookings',
            sa.Column('seq', sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column('id', sa.String(length=32), nullable=False, unique=True),
            sa.Column('owner_id', sa.String(length=64), nullable=False),
            sa.Column('route_id', sa.String(length=64), sa.ForeignKey('routes.id'), nullable=False),
            sa.Column('travel_date', sa.Date(), nullable=False),
            sa.Column('ticket_count', sa.Integer(), nullable=False),
            sa.Column('total_price', sa.Numeric(10, 2), nullable=False),
            sa.Column('status', sa.String(length=16), nullable=False, comment='Booking status: Confirmed, Pending'),
            sa.Column('departure', sa.String(length=120), nullable=False),
            sa.Column('destination', sa.String(length=120), nullable=False),
            sa.Column('departure_time', sa.String(length=32), nullable=False),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
            sa.CheckConstraint('ticket_count > 0', name='ck_bookings_ticket_count_positive'),
        )
        op.create_index('ix_bookings_owner_seq', 'bookings', ['owner_id', 'seq'])
        op.create_index('ix_bookings_route', 'bookings', ['route_id'])

    if not table_exists('subjects'):
        op.create_table(
            'subjects',
            sa.Column('id', sa.String(length=32), primary_key=True),
            sa.Column('owner_id', sa.String(length=64), nullable=False),
            sa.Column('name', sa.String(length=120), nullable=False),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        )
        op.create_index('ix_subjects_owner', 'subjects', ['owner_id'])

    if not table_exists('attendance_records'):
        op.create_table(
            'attendance_records',
            sa.Column('seq', sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column('id', sa.String(length=32), nullable=False, unique=True),
            sa.Column('owner_id', sa.String(length=64), nullable=False),
            sa.Column('subject_id', sa.String(length=32), sa.ForeignKey('subjects.id'), nullable=False),
            sa.Column('subject_name', sa.String(length=120), nullable=False),
            sa.Column('date', sa.Date(), nullable=False),
            sa.Column('status', sa.String(length=16), nullable=False, comment='Attendance status: Present, Absent, Late'),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        )
        op.create_index('ix_attendance_owner_seq', 'attendance_records', ['owner_id', 'seq'])


def downgrade() -> None:
    for table in ('attendance_records', 'subjects', 'bookings', 'routes'):
        if table_exists(table):
            op.drop_table(table)
