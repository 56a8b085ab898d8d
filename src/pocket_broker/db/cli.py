"""Console scripts for PocketBroker schema migrations (Alembic).

``db-generate -m "add index"`` autogenerates a revision from the SQLModel
metadata; ``db-migrate [revision]`` upgrades (default: head);
``db-downgrade [revision]`` steps back (default: one revision).
"""
import logging
import subprocess
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

# .../src/pocket_broker/db/cli.py -> repository root holding alembic.ini
_PROJECT_ROOT = Path(__file__).resolve().parents[3]


def _alembic(*args: str) -> None:
    logger.info("alembic %s", " ".join(args))
    subprocess.run(
        [sys.executable, "-m", "alembic", "-c", str(_PROJECT_ROOT / "alembic.ini"), *args],
        cwd=_PROJECT_ROOT,
        check=True,
    )


def generate() -> None:
    """Autogenerate a revision; extra argv (e.g. -m "msg") is passed through."""
    _alembic("revision", "--autogenerate", *sys.argv[1:])


def migrate() -> None:
    """Upgrade the schema to the given revision, or head."""
    target = sys.argv[1] if len(sys.argv) > 1 else "head"
    _alembic("upgrade", target, *sys.argv[2:])


def downgrade() -> None:
    """Downgrade the schema to the given revision, or by one step."""
    target = sys.argv[1] if len(sys.argv) > 1 else "-1"
    _alembic("downgrade", target, *sys.argv[2:])
