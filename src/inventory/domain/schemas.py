"""
Règles de validation des champs, exprimées avec pydantic.

Les mêmes contraintes servent à deux frontières de confiance :
- les events reçus du transport (EventValidator)
- les allocations relues depuis le stockage (builder de commandes)
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from inventory.domain.model import AllocationStatus

Identifier = Annotated[str, StringConstraints(strict=True, strip_whitespace=True, min_length=4)]
Timestamp = Annotated[str, StringConstraints(strict=True, strip_whitespace=True, min_length=4)]
Units = Annotated[int, Field(strict=True, ge=1)]
# Un nombre JSON fini ; les chaînes et booléens sont refusés.
WirePrice = Annotated[float, Field(strict=True, ge=0, allow_inf_nan=False)]
StoredPrice = Annotated[Decimal, Field(ge=0, allow_inf_nan=False)]


class EventDataSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    orderId: Identifier
    sku: Identifier
    units: Units
    price: WirePrice
    userId: Identifier


class EventSchema(BaseModel):
    """Forme d'un event de paiement tel qu'il arrive dans NewImage."""

    model_config = ConfigDict(frozen=True)

    eventName: str
    eventData: EventDataSchema
    createdAt: Timestamp
    updatedAt: Timestamp


class StreamRecordSchema(BaseModel):
    new_image: dict = Field(alias="NewImage")


class EnvelopeDetailSchema(BaseModel):
    dynamodb: StreamRecordSchema


class EnvelopeSchema(BaseModel):
    """Enveloppe du relais de flux de changements : {detail: {dynamodb: {NewImage}}}."""

    detail: EnvelopeDetailSchema


class StoredAllocationSchema(BaseModel):
    """Invariants d'une allocation relue depuis le stockage."""

    order_id: Identifier
    sku: Identifier
    user_id: Identifier
    units: Units
    price: StoredPrice
    status: AllocationStatus
    created_at: Timestamp
    updated_at: Timestamp
