"""add_no_overlap_exclusion_constraint

Revision ID: 9e2f5c8b7a14
Revises: 4b7d1e9a2c31
Create Date: 2026-10-05 10:41:03.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '9e2f5c8b7a14'
down_revision: Union[str, None] = '4b7d1e9a2c31'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Upgrade schema.

    La aplicación ya bloquea la cancha (SELECT FOR UPDATE) antes de buscar
    choques. Esta restricción es la segunda capa: aunque alguien escriba por
    fuera del libro de disponibilidad, dos ocupaciones vigentes de la misma
    cancha y fecha no pueden solaparse, sin importar si son reservas o mejengas.

    int4range(..., '[)') usa la misma semántica semiabierta que la aplicación:
    una ocupación que termina a las 15:00 no choca con otra que empieza a las 15:00.
    """
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist;")
    op.execute("""
        ALTER TABLE field_occupations
        ADD CONSTRAINT no_overlapping_field_occupations
        EXCLUDE USING gist (
            field_id WITH =,
            occupation_date WITH =,
            int4range(start_minute, end_minute, '[)') WITH &&
        )
        WHERE (status IN ('pending', 'paid', 'open', 'full'));
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute(
        "ALTER TABLE field_occupations "
        "DROP CONSTRAINT IF EXISTS no_overlapping_field_occupations;"
    )
    # btree_gist se deja instalada: otros índices pueden depender de ella
