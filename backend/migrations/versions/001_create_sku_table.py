"""Create skus table

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


def upgrade():
    # Trigger function keeping updated_at current on raw SQL updates
    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
          NEW.updated_at = NOW();
          RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)

    op.create_table(
        'skus',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('sku_code', sa.String(length=50), nullable=False),
        sa.Column('upc', sa.String(length=12), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('brand', sa.String(length=100), nullable=True),
        sa.Column('category', sa.String(length=50), nullable=False),
        sa.Column('subcategory', sa.String(length=50), nullable=True),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('cost', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('unit_of_measure', sa.String(length=20), nullable=True),
        sa.Column('quantity_per_unit', sa.Integer(), nullable=True),
        sa.Column('weight', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('dimension_length', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('dimension_width', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('dimension_height', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='ACTIVE'),
        sa.Column('tags', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('attributes', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.PrimaryKeyConstraint('id', name='pk_skus'),
        sa.CheckConstraint("status IN ('ACTIVE', 'DISCONTINUED')", name='ck_skus_status'),
    )

    # Natural keys
    op.create_index('ix_skus_sku_code', 'skus', ['sku_code'], unique=True)
    op.create_index('ix_skus_upc', 'skus', ['upc'], unique=True)

    # Filter columns
    op.create_index('ix_skus_category', 'skus', ['category'])
    op.create_index('ix_skus_status', 'skus', ['status'])
    op.create_index('ix_skus_brand', 'skus', ['brand'])

    op.execute("""
        CREATE TRIGGER update_skus_updated_at
        BEFORE UPDATE ON skus
        FOR EACH ROW
        EXECUTE FUNCTION update_updated_at_column();
    """)


def downgrade():
    op.execute('DROP TRIGGER IF EXISTS update_skus_updated_at ON skus')

    op.drop_index('ix_skus_brand', table_name='skus')
    op.drop_index('ix_skus_status', table_name='skus')
    op.drop_index('ix_skus_category', table_name='skus')
    op.drop_index('ix_skus_upc', table_name='skus')
    op.drop_index('ix_skus_sku_code', table_name='skus')

    op.drop_table('skus')

    op.execute('DROP FUNCTION IF EXISTS update_updated_at_column()')
