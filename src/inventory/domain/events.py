"""
Events du domaine.

Les events entrants sont des faits émis par le contexte paiements :
le paiement d'une commande a été accepté ou refusé. Ils sont transitoires
(jamais persistés ici) et n'existent qu'une fois validés par
l'EventValidator.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Decimal


class EventName(str, enum.Enum):
    ORDER_PAYMENT_ACCEPTED = "ORDER_PAYMENT_ACCEPTED_EVENT"
    ORDER_PAYMENT_REJECTED = "ORDER_PAYMENT_REJECTED_EVENT"


@dataclass(frozen=True)
class Event:
    """Champs communs à tous les events de paiement."""

    order_id: str
    sku: str
    units: int
    price: Decimal
    user_id: str
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class PaymentAccepted(Event):
    """Le paiement de la commande a été accepté."""


@dataclass(frozen=True)
class PaymentRejected(Event):
    """Le paiement de la commande a été refusé."""
