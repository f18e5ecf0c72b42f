"""
Définition des tables avec SQLAlchemy Core.

Les transitions sont des UPDATE conditionnels écrits directement
sur les tables : aucune classe du domaine n'est mappée, l'Allocation
est reconstruite à la lecture par le repository.

Les noms de tables viennent de la configuration du worker.
"""

from sqlalchemy import Column, Integer, MetaData, Numeric, String, Table

from inventory import config

metadata = MetaData()

allocations = Table(
    config.get_inventory_table_name(),
    metadata,
    Column("order_id", String(255), primary_key=True),
    Column("sku", String(255), primary_key=True),
    Column("user_id", String(255), nullable=False),
    Column("units", Integer, nullable=False),
    Column("price", Numeric(12, 2), nullable=False),
    Column("status", String(32), nullable=False),
    Column("created_at", String(64), nullable=False),
    Column("updated_at", String(64), nullable=False),
)

warehouse_stock = Table(
    config.get_warehouse_stock_table_name(),
    metadata,
    Column("sku", String(255), primary_key=True),
    Column("units", Integer, nullable=False, server_default="0"),
    Column("updated_at", String(64), nullable=True),
)
