"""
Pattern Repository : le stockage des allocations.

Le store expose deux opérations :
- get : lecture d'une allocation par sa clé (commande, SKU)
- apply_guarded : écriture conditionnelle d'une TransitionCommand

L'écriture conditionnelle est le seul mécanisme de synchronisation
du pipeline (verrouillage optimiste) : la mise à jour n'est appliquée
que si le statut courant est encore celui attendu. Quand la command
porte un effet compensatoire, la mise à jour de l'allocation et
l'incrément du stock sont validés dans une seule transaction.

Toutes les erreurs sont retournées sous forme d'Outcome :
- précondition non remplie -> InvalidTransitionError, non transitoire
- toute autre erreur de stockage -> UnrecognizedError, transitoire
"""

from __future__ import annotations

import abc
import logging
from typing import Callable, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from inventory.adapters import orm
from inventory.domain import outcome
from inventory.domain.commands import TransitionCommand
from inventory.domain.model import Allocation
from inventory.service_layer import unit_of_work

logger = logging.getLogger(__name__)


class PreconditionFailed(Exception):
    """L'enregistrement n'est plus dans l'état attendu par la command."""


class AbstractAllocationStore(abc.ABC):
    @abc.abstractmethod
    def get(self, order_id: str, sku: str) -> outcome.Outcome[Optional[Allocation]]:
        raise NotImplementedError

    @abc.abstractmethod
    def apply_guarded(self, command: TransitionCommand) -> outcome.Outcome[None]:
        raise NotImplementedError


class SqlAlchemyAllocationStore(AbstractAllocationStore):
    """
    Implémentation concrète avec SQLAlchemy.

    Chaque appel ouvre son propre Unit of Work : le store peut donc
    être partagé entre plusieurs threads d'un même worker.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        uow_factory: Callable[[sessionmaker], unit_of_work.AbstractUnitOfWork] = unit_of_work.SqlAlchemyUnitOfWork,
    ):
        self.session_factory = session_factory
        self.uow_factory = uow_factory

    def get(self, order_id: str, sku: str) -> outcome.Outcome[Optional[Allocation]]:
        query = select(orm.allocations).where(
            orm.allocations.c.order_id == order_id,
            orm.allocations.c.sku == sku,
        )
        try:
            with self.uow_factory(self.session_factory) as uow:
                row = uow.session.execute(query).mappings().first()
        except SQLAlchemyError as error:
            logger.error("Lecture de l'allocation (%s, %s) impossible : %s", order_id, sku, error)
            return outcome.failure(outcome.FailureKind.UNRECOGNIZED, error, transient=True)

        if row is None:
            logger.debug("Aucune allocation pour (%s, %s)", order_id, sku)
            return outcome.success(None)
        return outcome.success(Allocation(**row))

    def apply_guarded(self, command: TransitionCommand) -> outcome.Outcome[None]:
        try:
            with self.uow_factory(self.session_factory) as uow:
                self._update_allocation(uow, command)
                if command.has_compensation:
                    self._increment_stock(uow, command)
                uow.commit()
        except PreconditionFailed as error:
            logger.warning("Transition refusée pour %s : %s", command, error)
            return outcome.failure(outcome.FailureKind.INVALID_TRANSITION, error, transient=False)
        except SQLAlchemyError as error:
            logger.error("Écriture de %s impossible : %s", command, error)
            return outcome.failure(outcome.FailureKind.UNRECOGNIZED, error, transient=True)

        logger.info(
            "Allocation (%s, %s) : %s -> %s",
            command.order_id, command.sku, command.from_status.value, command.to_status.value,
        )
        return outcome.success()

    def _update_allocation(self, uow: unit_of_work.AbstractUnitOfWork, command: TransitionCommand) -> None:
        statement = (
            update(orm.allocations)
            .where(
                orm.allocations.c.order_id == command.order_id,
                orm.allocations.c.sku == command.sku,
                orm.allocations.c.status == command.from_status.value,
            )
            .values(status=command.to_status.value, updated_at=command.updated_at)
        )
        result = uow.session.execute(statement)
        if result.rowcount != 1:
            raise PreconditionFailed(
                f"Allocation ({command.order_id}, {command.sku}) is not {command.from_status.value}"
            )

    def _increment_stock(self, uow: unit_of_work.AbstractUnitOfWork, command: TransitionCommand) -> None:
        statement = (
            update(orm.warehouse_stock)
            .where(orm.warehouse_stock.c.sku == command.sku)
            .values(
                units=orm.warehouse_stock.c.units + command.stock_delta,
                updated_at=command.updated_at,
            )
        )
        result = uow.session.execute(statement)
        if result.rowcount != 1:
            raise PreconditionFailed(f"No warehouse stock for SKU {command.sku}")
