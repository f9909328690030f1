"""Initial migration: pets, adoption requests and purchases

Revision ID: 001
Revises: 
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), 'postgresql')


def _audit_columns():
    return [
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('created_by', sa.Uuid(), nullable=True),
        sa.Column('updated_by', sa.Uuid(), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), server_default=sa.text('false'), nullable=False),
    ]


def upgrade() -> None:
    # Create pets table
    op.create_table('pets',
        *_audit_columns(),
        sa.Column('owner_email', sa.String(length=254), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('species', sa.Enum('dog', 'cat', 'rabbit', 'bird', 'fish', 'other', name='pet_species'), nullable=False),
        sa.Column('breed', sa.String(length=100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('purpose', sa.Enum('pet', 'sell', name='pet_purpose'), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('status', sa.Enum('pending', 'approved', 'rejected', name='listing_status'), nullable=False),
        sa.Column('adopted', sa.Boolean(), nullable=False),
        sa.Column('sold', sa.Boolean(), nullable=False),
        sa.Column('vaccinations', JSON_TYPE, nullable=False),
        sa.Column('date_added', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("purpose != 'sell' OR (price IS NOT NULL AND price > 0)", name='ck_pets_sell_price_positive'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_pets_owner_email', 'pets', ['owner_email'])
    op.create_index('ix_pets_species', 'pets', ['species'])
    op.create_index('ix_pets_status', 'pets', ['status'])
    op.create_index('idx_pets_status_purpose', 'pets', ['status', 'purpose'])

    # Create adoption_requests table
    op.create_table('adoption_requests',
        *_audit_columns(),
        sa.Column('pet_id', sa.Uuid(), nullable=False),
        sa.Column('adopter_email', sa.String(length=254), nullable=True),
        sa.Column('adopter_name', sa.String(length=100), nullable=True),
        sa.Column('owner_email', sa.String(length=254), nullable=True),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('status', sa.Enum('pending', 'accepted', 'closed', name='adoption_status'), nullable=False),
        sa.Column('accepted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['pet_id'], ['pets.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_adoption_requests_pet_id', 'adoption_requests', ['pet_id'])
    op.create_index('ix_adoption_requests_status', 'adoption_requests', ['status'])
    op.create_index('idx_adoption_requests_pet_status', 'adoption_requests', ['pet_id', 'status'])

    # Create purchases table
    op.create_table('purchases',
        *_audit_columns(),
        sa.Column('pet_id', sa.Uuid(), nullable=False),
        sa.Column('buyer_email', sa.String(length=254), nullable=True),
        sa.Column('buyer_name', sa.String(length=100), nullable=True),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('payment_reference', sa.String(length=255), nullable=True),
        sa.CheckConstraint('amount IS NULL OR amount >= 0', name='ck_purchases_amount_non_negative'),
        sa.ForeignKeyConstraint(['pet_id'], ['pets.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_purchases_pet_id', 'purchases', ['pet_id'])


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_table('purchases')
    op.drop_table('adoption_requests')
    op.drop_table('pets')

    # Drop enum types (PostgreSQL only)
    if op.get_bind().dialect.name == 'postgresql':
        op.execute("DROP TYPE IF EXISTS adoption_status")
        op.execute("DROP TYPE IF EXISTS listing_status")
        op.execute("DROP TYPE IF EXISTS pet_purpose")
        op.execute("DROP TYPE IF EXISTS pet_species")
