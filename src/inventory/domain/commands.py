"""
Commands du domaine.

Une TransitionCommand décrit une seule écriture conditionnelle :
quelle allocation modifier, le statut attendu avant l'écriture,
le statut cible et l'éventuel effet compensatoire sur le stock.

Elle n'est jamais construite directement : build_transition_command
valide ses entrées et retourne un Outcome, de sorte qu'aucune
command partiellement valide ne peut exister.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError

from inventory.domain import events, outcome
from inventory.domain.model import Allocation, AllocationStatus
from inventory.domain.schemas import StoredAllocationSchema

logger = logging.getLogger(__name__)


class Direction(enum.Enum):
    """
    Famille d'events traitée par un worker.

    Chaque direction fixe le nom d'event attendu, la classe d'event
    produite, le statut cible et si la transition rend des unités
    au stock de l'entrepôt.
    """

    PAYMENT_ACCEPTED = (
        events.EventName.ORDER_PAYMENT_ACCEPTED,
        events.PaymentAccepted,
        AllocationStatus.COMPLETED,
        False,
    )
    PAYMENT_REJECTED = (
        events.EventName.ORDER_PAYMENT_REJECTED,
        events.PaymentRejected,
        AllocationStatus.DEALLOCATED,
        True,
    )

    def __init__(self, event_name, event_class, target_status, restocks):
        self.event_name: events.EventName = event_name
        self.event_class: type[events.Event] = event_class
        self.target_status: AllocationStatus = target_status
        self.expected_status = AllocationStatus.ALLOCATED
        self.restocks: bool = restocks


@dataclass(frozen=True)
class TransitionCommand:
    order_id: str
    sku: str
    units: int
    updated_at: str
    from_status: AllocationStatus
    to_status: AllocationStatus
    stock_delta: int = 0

    @property
    def has_compensation(self) -> bool:
        return self.stock_delta != 0


def build_transition_command(
    allocation: Allocation,
    event: events.Event,
    direction: Direction,
    now: Optional[datetime] = None,
) -> outcome.Outcome[TransitionCommand]:
    """
    Construit la command de transition pour une allocation existante.

    L'allocation est revalidée ici car elle provient du stockage.
    Les unités et le prix de l'event ne sont volontairement pas
    comparés à ceux de l'allocation : c'est l'allocation persistée qui
    fait foi, l'event ne fait que déclencher la transition.
    """
    if not isinstance(event, direction.event_class):
        return outcome.failure(
            outcome.FailureKind.INVALID_ARGUMENTS,
            f"Expected {direction.event_class.__name__} but got {type(event).__name__}",
            transient=False,
        )

    try:
        stored = StoredAllocationSchema.model_validate(vars(allocation))
    except (ValidationError, TypeError) as error:
        logger.warning("Allocation invalide relue du stockage %s : %s", allocation, error)
        return outcome.failure(outcome.FailureKind.INVALID_ARGUMENTS, error, transient=False)

    if now is None:
        now = datetime.now(timezone.utc)

    command = TransitionCommand(
        order_id=event.order_id,
        sku=event.sku,
        units=stored.units,
        updated_at=now.isoformat(),
        from_status=direction.expected_status,
        to_status=direction.target_status,
        stock_delta=stored.units if direction.restocks else 0,
    )
    logger.debug("Command construite %s", command)
    return outcome.success(command)
