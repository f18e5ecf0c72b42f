"""
Algèbre de résultat (Outcome).

Chaque composant du pipeline rapporte son statut avec une valeur
Success ou Failure plutôt qu'en levant une exception. Les exceptions
restent réservées aux pannes réellement inattendues.

Une Failure porte :
- son type (FailureKind)
- la cause (une exception)
- un drapeau `transient` : True si une nouvelle livraison du message
  peut réussir, False si l'échec se reproduira à coup sûr.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


class FailureKind(str, enum.Enum):
    INVALID_ARGUMENTS = "InvalidArgumentsError"
    INVALID_TRANSITION = "InvalidTransitionError"
    UNRECOGNIZED = "UnrecognizedError"


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T = None


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    cause: Exception
    transient: bool


Outcome = Union[Success[T], Failure]


def success(value: Any = None) -> Success:
    return Success(value)


def failure(kind: FailureKind, cause: object, transient: bool) -> Failure:
    """
    Construit une Failure en normalisant la cause.

    Une exception est conservée telle quelle, un texte est enveloppé
    dans une exception préfixée par le type d'échec ; tout le reste
    devient une erreur non reconnue.
    """
    if isinstance(cause, Exception):
        error = cause
    elif isinstance(cause, str):
        error = Exception(f"[{kind.value}]: {cause}")
    else:
        error = Exception("[UnrecognizedError]: Unrecognized error")
    return Failure(kind=kind, cause=error, transient=transient)


def is_success(outcome: Outcome) -> bool:
    return isinstance(outcome, Success)


def is_failure(outcome: Outcome) -> bool:
    return isinstance(outcome, Failure)


def is_failure_of_kind(outcome: Outcome, kind: FailureKind) -> bool:
    return is_failure(outcome) and outcome.kind == kind


def is_failure_transient(outcome: Outcome) -> bool:
    return is_failure(outcome) and outcome.transient is True
