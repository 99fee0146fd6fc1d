"""create atelier tables

Revision ID: 5c1e7a9d2b40
Revises:
Create Date: 2026-10-17 10:12:31.402117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '5c1e7a9d2b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('clients',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('tailor_id', sa.UUID(), nullable=False, comment='Owning tailor (auth user id)'),
    sa.Column('full_name', sa.String(), nullable=False),
    sa.Column('email', sa.String(), nullable=True),
    sa.Column('phone', sa.String(), nullable=True),
    sa.Column('address', sa.Text(), nullable=True),
    sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('id'),
    comment='Atelier clients; name uniqueness is not enforced'
    )
    op.create_index(op.f('ix_clients_tailor_id'), 'clients', ['tailor_id'], unique=False)

    op.create_table('client_measurements',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('tailor_id', sa.UUID(), nullable=False),
    sa.Column('client_id', sa.UUID(), nullable=False),
    sa.Column('raw_text', sa.Text(), nullable=True),
    sa.Column('structured_data', postgresql.JSONB(astext_type=sa.Text()), nullable=True, comment='Original garment -> key -> value mapping'),
    sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id'),
    comment='Measurement sessions'
    )
    op.create_index(op.f('ix_client_measurements_tailor_id'), 'client_measurements', ['tailor_id'], unique=False)
    op.create_index(op.f('ix_client_measurements_client_id'), 'client_measurements', ['client_id'], unique=False)

    op.create_table('client_measurement_values',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('measurement_id', sa.UUID(), nullable=False),
    sa.Column('garment', sa.String(), nullable=False),
    sa.Column('key', sa.String(), nullable=False),
    sa.Column('value', sa.Float(), nullable=True, comment='Null when the raw value did not parse'),
    sa.Column('unit', sa.String(), nullable=True),
    sa.ForeignKeyConstraint(['measurement_id'], ['client_measurements.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id'),
    comment='Flattened measurement values'
    )
    op.create_index(op.f('ix_client_measurement_values_measurement_id'), 'client_measurement_values', ['measurement_id'], unique=False)

    op.create_table('client_notes',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('tailor_id', sa.UUID(), nullable=False),
    sa.Column('client_id', sa.UUID(), nullable=False),
    sa.Column('raw_text', sa.Text(), nullable=False),
    sa.Column('notes', postgresql.ARRAY(sa.Text()), nullable=False),
    sa.Column('source', sa.String(), nullable=False, comment='ai or manual'),
    sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_client_notes_tailor_id'), 'client_notes', ['tailor_id'], unique=False)
    op.create_index(op.f('ix_client_notes_client_id'), 'client_notes', ['client_id'], unique=False)

    op.create_table('client_files',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('client_id', sa.UUID(), nullable=False),
    sa.Column('storage_path', sa.String(), nullable=False),
    sa.Column('original_name', sa.String(), nullable=True),
    sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_client_files_client_id'), 'client_files', ['client_id'], unique=False)

    op.create_table('orders',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('tailor_id', sa.UUID(), nullable=False),
    sa.Column('client_id', sa.UUID(), nullable=True),
    sa.Column('order_number', sa.String(), nullable=True, comment='Time-derived, not unique'),
    sa.Column('status', sa.String(), nullable=False),
    sa.Column('order_date', sa.Date(), nullable=True),
    sa.Column('delivery_date', sa.Date(), nullable=True),
    sa.Column('total_amount', sa.Numeric(precision=12, scale=2), nullable=True),
    sa.Column('notes', sa.Text(), nullable=True),
    sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='SET NULL'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_orders_tailor_id'), 'orders', ['tailor_id'], unique=False)
    op.create_index(op.f('ix_orders_client_id'), 'orders', ['client_id'], unique=False)

    op.create_table('order_items',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('order_id', sa.UUID(), nullable=False),
    sa.Column('garment', sa.String(), nullable=False),
    sa.Column('quantity', sa.Integer(), nullable=False),
    sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_order_items_order_id'), 'order_items', ['order_id'], unique=False)

    op.create_table('order_files',
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('order_id', sa.UUID(), nullable=False),
    sa.Column('storage_path', sa.String(), nullable=False),
    sa.Column('original_name', sa.String(), nullable=True),
    sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_order_files_order_id'), 'order_files', ['order_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_order_files_order_id'), table_name='order_files')
    op.drop_table('order_files')
    op.drop_index(op.f('ix_order_items_order_id'), table_name='order_items')
    op.drop_table('order_items')
    op.drop_index(op.f('ix_orders_client_id'), table_name='orders')
    op.drop_index(op.f('ix_orders_tailor_id'), table_name='orders')
    op.drop_table('orders')
    op.drop_index(op.f('ix_client_files_client_id'), table_name='client_files')
    op.drop_table('client_files')
    op.drop_index(op.f('ix_client_notes_client_id'), table_name='client_notes')
    op.drop_index(op.f('ix_client_notes_tailor_id'), table_name='client_notes')
    op.drop_table('client_notes')
    op.drop_index(op.f('ix_client_measurement_values_measurement_id'), table_name='client_measurement_values')
    op.drop_table('client_measurement_values')
    op.drop_index(op.f('ix_client_measurements_client_id'), table_name='client_measurements')
    op.drop_index(op.f('ix_client_measurements_tailor_id'), table_name='client_measurements')
    op.drop_table('client_measurements')
    op.drop_index(op.f('ix_clients_tailor_id'), table_name='clients')
    op.drop_table('clients')
