"""
Validation des messages entrants.

Transforme le corps brut d'un message (JSON non fiable) en un event
du domaine typé. Tout échec est non transitoire : relivrer un message
structurellement invalide ne le rendra jamais valide, et le classer
transitoire provoquerait une boucle de relivraison infinie.
"""

from __future__ import annotations

import logging
from decimal import Decimal, DecimalException

from boto3.dynamodb.types import TypeDeserializer
from pydantic import ValidationError

from inventory.domain import events, outcome
from inventory.domain.schemas import EnvelopeSchema, EventSchema

logger = logging.getLogger(__name__)

ATTRIBUTE_TYPES = {"S", "N", "B", "BOOL", "NULL", "M", "L", "SS", "NS", "BS"}

_deserializer = TypeDeserializer()


class EventValidator:
    """
    Valide une seule famille d'events.

    Le discriminant eventName doit être exactement celui attendu ;
    un autre event métier, même connu, est refusé.
    """

    def __init__(self, event_name: events.EventName, event_class: type[events.Event]):
        self.event_name = event_name
        self.event_class = event_class

    def parse(self, raw_payload: object) -> outcome.Outcome[events.Event]:
        if not isinstance(raw_payload, (str, bytes, bytearray)):
            return self._invalid(f"Expected a JSON body but got {type(raw_payload).__name__}")

        try:
            envelope = EnvelopeSchema.model_validate_json(raw_payload)
            image = decode_image(envelope.detail.dynamodb.new_image)
            schema = EventSchema.model_validate(image)
        except (ValidationError, AttributeError, TypeError, ValueError, DecimalException) as error:
            logger.warning("Message invalide : %s", error)
            return outcome.failure(outcome.FailureKind.INVALID_ARGUMENTS, error, transient=False)

        if schema.eventName != self.event_name.value:
            return self._invalid(
                f"Expected eventName {self.event_name.value} but got {schema.eventName}"
            )

        data = schema.eventData
        event = self.event_class(
            order_id=data.orderId,
            sku=data.sku,
            units=data.units,
            price=Decimal(str(data.price)),
            user_id=data.userId,
            created_at=schema.createdAt,
            updated_at=schema.updatedAt,
        )
        logger.debug("Event validé %s", event)
        return outcome.success(event)

    def _invalid(self, message: str) -> outcome.Failure:
        logger.warning("Message invalide : %s", message)
        return outcome.failure(outcome.FailureKind.INVALID_ARGUMENTS, message, transient=False)


def is_typed_image(image: dict) -> bool:
    """Vrai si chaque valeur est un descripteur typé du flux, ex. {"S": "..."}."""
    return bool(image) and all(
        isinstance(value, dict) and len(value) == 1 and next(iter(value)) in ATTRIBUTE_TYPES
        for value in image.values()
    )


def decode_image(image: dict) -> dict:
    """
    Décode une NewImage en valeurs typées vers du JSON simple.

    Une image déjà en JSON simple est retournée telle quelle. Les
    nombres décodés sont des Decimal : un entier redevient int, les
    autres un float, comme après un json.loads du même event.
    """
    if not is_typed_image(image):
        return image
    decoded = {key: _deserializer.deserialize(value) for key, value in image.items()}
    return _as_json_numbers(decoded)


def _as_json_numbers(value):
    if isinstance(value, dict):
        return {key: _as_json_numbers(item) for key, item in value.items()}
    if isinstance(value, (list, set)):
        return [_as_json_numbers(item) for item in value]
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Non-finite number {value}")
        return int(value) if value == value.to_integral_value() else float(value)
    return value
