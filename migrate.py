#!/usr/bin/env python3
"""
Migraciones de la base de datos de DinamicBar (Alembic).

Uso:
  python migrate.py create 'mensaje'   # Nueva migración autogenerada
  python migrate.py upgrade            # Aplicar migraciones pendientes
  python migrate.py downgrade          # Revertir la última migración
  python migrate.py stamp              # Marcar como actual una base creada con create_all
  python migrate.py history            # Historial
  python migrate.py current            # Revisión actual
"""
import sys
from pathlib import Path

# Agregar el directorio raíz al path
root_dir = Path(__file__).parent
sys.path.insert(0, str(root_dir))

from alembic.config import Config
from alembic import command
from dinamicbar.core.config import settings


def get_alembic_config() -> Config:
    """Configuración de Alembic con la URL de la base de datos de settings."""
    alembic_cfg = Config(str(root_dir / "alembic.ini"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)
    return alembic_cfg


def create_migration(cfg: Config, message: str):
    command.revision(cfg, autogenerate=True, message=message)
    print(f"Migración creada: {message}")


def upgrade(cfg: Config):
    command.upgrade(cfg, "head")
    print("Migraciones aplicadas")


def downgrade(cfg: Config):
    command.downgrade(cfg, "-1")
    print("Última migración revertida")


def stamp(cfg: Config):
    command.stamp(cfg, "head")
    print("Base de datos marcada en la última revisión")


COMMANDS = {
    "upgrade": upgrade,
    "downgrade": downgrade,
    "stamp": stamp,
    "history": command.history,
    "current": command.current,
}


def main(argv):
    if len(argv) < 2:
        print(__doc__)
        return 1

    action = argv[1]
    cfg = get_alembic_config()

    if action == "create":
        if len(argv) < 3:
            print("Error: Se requiere un mensaje para la migración")
            return 1
        create_migration(cfg, argv[2])
        return 0

    handler = COMMANDS.get(action)
    if handler is None:
        print(f"Acción desconocida: {action}")
        return 1
    handler(cfg)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
