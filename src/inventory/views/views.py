"""
Views (lecture) pour le pattern CQRS.

Fonctions de lecture pure qui interrogent directement les tables,
sans passer par le modèle de domaine ni par le pipeline de transitions.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from inventory.adapters import orm
from inventory.service_layer import unit_of_work


def allocations(order_id: str, session_factory: sessionmaker) -> list[dict]:
    """Retourne les allocations d'une commande, tous SKU confondus."""
    query = (
        select(
            orm.allocations.c.sku,
            orm.allocations.c.units,
            orm.allocations.c.status,
            orm.allocations.c.updated_at,
        )
        .where(orm.allocations.c.order_id == order_id)
        .order_by(orm.allocations.c.sku)
    )
    with unit_of_work.SqlAlchemyUnitOfWork(session_factory) as uow:
        return [dict(row) for row in uow.session.execute(query).mappings()]


def stock(sku: str, session_factory: sessionmaker) -> dict | None:
    """Retourne le stock disponible d'un SKU, ou None s'il est inconnu."""
    query = select(orm.warehouse_stock).where(orm.warehouse_stock.c.sku == sku)
    with unit_of_work.SqlAlchemyUnitOfWork(session_factory) as uow:
        row = uow.session.execute(query).mappings().first()
        return dict(row) if row else None
