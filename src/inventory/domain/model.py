"""
Modèle de domaine pour les allocations de stock.

Une Allocation réserve des unités d'un SKU pour une commande donnée.
Elle est créée en amont (hors de ce service) avec le statut ALLOCATED ;
ici on la lit puis on la fait transiter, sous condition, vers un
statut terminal lorsque le résultat du paiement est connu.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Decimal


class AllocationStatus(str, enum.Enum):
    """
    Cycle de vie d'une allocation.

    Seul ALLOCATED peut encore transiter ; les autres statuts
    sont terminaux pour ce pipeline.
    """

    ALLOCATED = "ALLOCATED"
    COMPLETED = "COMPLETED"
    PAYMENT_REJECTED = "PAYMENT_REJECTED"
    DEALLOCATED = "DEALLOCATED"


@dataclass(frozen=True)
class Allocation:
    """
    Réservation de stock pour une paire (commande, SKU).

    Les valeurs sont celles lues en base, sans validation : le stockage
    est une frontière de confiance à part entière et c'est le builder
    de commandes qui revérifie les invariants avant toute transition.
    """

    order_id: str
    sku: str
    user_id: str
    units: int
    price: Decimal
    status: str
    created_at: str
    updated_at: str
