from alembic import op
import sqlalchemy as sa


revision = '0001_init_virtual_fitting'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'virtual_fitting',
        sa.Column('id', sa.BigInteger().with_variant(sa.Integer(), 'sqlite'), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('result_image_url', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_virtual_fitting_user_id', 'virtual_fitting', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_virtual_fitting_user_id', table_name='virtual_fitting')
    op.drop_table('virtual_fitting')
