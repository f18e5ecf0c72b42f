"""
Orchestrateur de lots.

Le transport livre les messages par lots, au moins une fois, et
accepte un acquittement message par message. L'orchestrateur traite
chaque message indépendamment et retourne les identifiants des
seuls messages à relivrer.

Classement du résultat de chaque message :
- Success -> acquitté
- Failure non transitoire -> acquitté (message empoisonné, on l'écarte)
- Failure transitoire -> ajouté à la liste de relivraison

Un message en échec ne bloque jamais les autres.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Mapping, Optional

from inventory.domain import outcome
from inventory.service_layer.services import TransitionService

logger = logging.getLogger(__name__)


class BatchOrchestrator:
    def __init__(self, service: TransitionService, max_workers: int = 1):
        self.service = service
        self.max_workers = max(1, max_workers)

    def process_batch(self, batch: Optional[Mapping[str, Any]]) -> dict[str, list[str]]:
        """
        Traite un lot {"Records": [{"messageId", "body"}, ...]}.

        Un lot absent, vide ou mal formé retourne une liste vide
        sans rien appeler en aval.
        """
        records = _records_of(batch)
        if not records:
            logger.warning("Lot vide ou mal formé, rien à traiter : %r", batch)
            return {"retryIds": []}

        if self.max_workers == 1:
            retries = [self._process_record(record) for record in records]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                retries = list(executor.map(self._process_record, records))

        retry_ids = [message_id for message_id in retries if message_id is not None]
        logger.info("Lot traité : %d messages, %d à relivrer", len(records), len(retry_ids))
        return {"retryIds": retry_ids}

    def _process_record(self, record: Any) -> Optional[str]:
        """Retourne l'identifiant du message s'il doit être relivré."""
        message_id, body = _unpack(record)
        try:
            result = self.service.handle(body)
        except Exception as error:
            logger.exception("Erreur inattendue sur le message %s", message_id)
            result = outcome.failure(outcome.FailureKind.UNRECOGNIZED, error, transient=True)

        if outcome.is_success(result):
            logger.debug("Message %s acquitté", message_id)
            return None

        if not outcome.is_failure_transient(result):
            logger.warning(
                "Message %s écarté (%s) : %s", message_id, result.kind.value, result.cause
            )
            return None

        if message_id is None:
            logger.error("Message sans identifiant en échec transitoire, impossible à relivrer")
            return None

        logger.error("Message %s à relivrer (%s) : %s", message_id, result.kind.value, result.cause)
        return message_id


def _records_of(batch: Any) -> list:
    if not isinstance(batch, Mapping):
        return []
    records = batch.get("Records", batch.get("records"))
    if not isinstance(records, (list, tuple)):
        return []
    return list(records)


def _unpack(record: Any) -> tuple[Optional[str], Any]:
    if not isinstance(record, Mapping):
        return None, None
    message_id = record.get("messageId", record.get("id"))
    return message_id, record.get("body")
