"""
Bootstrap : assemblage de l'application (Composition Root).

Construit un orchestrateur par famille d'events (un par worker).
C'est le seul endroit qui connaît les implémentations concrètes ;
les tests y injectent un store en mémoire.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import sessionmaker

from inventory import config
from inventory.adapters import repository
from inventory.domain.commands import Direction
from inventory.service_layer import orchestrator, services, unit_of_work


def bootstrap(
    direction: Direction,
    store: Optional[repository.AbstractAllocationStore] = None,
    session_factory: Optional[sessionmaker] = None,
    max_workers: Optional[int] = None,
) -> orchestrator.BatchOrchestrator:
    """
    Construit et retourne l'orchestrateur d'une direction.

    En production, le store SQLAlchemy est créé depuis la configuration.
    En test, on injecte un store ou une session factory.
    """
    if store is None:
        if session_factory is None:
            session_factory = unit_of_work.default_session_factory()
        store = repository.SqlAlchemyAllocationStore(session_factory)

    if max_workers is None:
        max_workers = config.get_batch_max_workers()

    service = services.TransitionService(direction=direction, store=store)
    return orchestrator.BatchOrchestrator(service, max_workers=max_workers)


def bootstrap_all(
    session_factory: Optional[sessionmaker] = None,
) -> dict[Direction, orchestrator.BatchOrchestrator]:
    """Un orchestrateur par direction, partageant la même session factory."""
    if session_factory is None:
        session_factory = unit_of_work.default_session_factory()
    return {
        direction: bootstrap(direction, session_factory=session_factory)
        for direction in Direction
    }
