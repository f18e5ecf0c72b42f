"""
Service layer : traitement d'un message de paiement.

Le TransitionService enchaîne les étapes d'un cas d'usage :
1. valider le message entrant
2. lire l'allocation correspondante
3. ignorer le message si elle n'existe pas
4. construire la command de transition
5. appliquer l'écriture conditionnelle

Chaque étape retourne un Outcome ; un échec est propagé tel quel,
sans être réinterprété. Seul l'orchestrateur décide ensuite s'il
faut relivrer le message.
"""

from __future__ import annotations

import logging

from inventory.adapters.event_validator import EventValidator
from inventory.adapters.repository import AbstractAllocationStore
from inventory.domain import outcome
from inventory.domain.commands import Direction, build_transition_command

logger = logging.getLogger(__name__)


class TransitionService:
    def __init__(
        self,
        direction: Direction,
        store: AbstractAllocationStore,
        validator: EventValidator | None = None,
    ):
        self.direction = direction
        self.store = store
        if validator is None:
            validator = EventValidator(direction.event_name, direction.event_class)
        self.validator = validator

    def handle(self, raw_payload: object) -> outcome.Outcome[None]:
        parsed = self.validator.parse(raw_payload)
        if outcome.is_failure(parsed):
            return parsed
        event = parsed.value

        fetched = self.store.get(event.order_id, event.sku)
        if outcome.is_failure(fetched):
            return fetched
        allocation = fetched.value

        if allocation is None:
            # Relivraison après traitement, ou allocation jamais créée :
            # les deux cas sont indiscernables par la clé et sans danger.
            logger.info(
                "Aucune allocation pour (%s, %s), message ignoré",
                event.order_id, event.sku,
            )
            return outcome.success()

        built = build_transition_command(allocation, event, self.direction)
        if outcome.is_failure(built):
            return built

        return self.store.apply_guarded(built.value)
