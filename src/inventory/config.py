"""
Configuration lue depuis l'environnement.

Chaque worker reçoit de son déploiement le nom de la table à cibler ;
les valeurs par défaut conviennent au développement local (SQLite).
"""

import os


def get_database_uri() -> str:
    return os.environ.get("DATABASE_URI", "sqlite:///inventory.db")


def get_inventory_table_name() -> str:
    return os.environ.get("INVENTORY_TABLE_NAME", "allocations")


def get_warehouse_stock_table_name() -> str:
    return os.environ.get("WAREHOUSE_STOCK_TABLE_NAME", "warehouse_stock")


def get_batch_max_workers() -> int:
    return int(os.environ.get("BATCH_MAX_WORKERS", "1"))


def get_db_timeout_seconds() -> int:
    return int(os.environ.get("DB_TIMEOUT_SECONDS", "5"))
