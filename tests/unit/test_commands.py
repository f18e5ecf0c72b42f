"""
Tests unitaires du builder de TransitionCommand.

L'allocation relue du stockage est revalidée indépendamment de
l'event ; l'event ne sert que de déclencheur.
"""

import dataclasses
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from inventory.domain import events, outcome
from inventory.domain.commands import Direction, TransitionCommand, build_transition_command
from inventory.domain.model import Allocation, AllocationStatus
from inventory.domain.outcome import FailureKind

NOW = datetime(2024, 10, 19, 3, 24, tzinfo=timezone.utc)


def make_allocation(**overrides) -> Allocation:
    fields = dict(
        order_id="mockOrderId",
        sku="mockSku",
        user_id="mockUserId",
        units=2,
        price=Decimal("10.33"),
        status="ALLOCATED",
        created_at="2024-10-19T03:24:00.000Z",
        updated_at="2024-10-19T03:24:00.000Z",
    )
    fields.update(overrides)
    return Allocation(**fields)


def make_event(event_class=events.PaymentAccepted, **overrides):
    fields = dict(
        order_id="mockOrderId",
        sku="mockSku",
        units=2,
        price=Decimal("10.33"),
        user_id="mockUserId",
        created_at="2024-10-19T03:24:00.000Z",
        updated_at="2024-10-19T03:24:00.000Z",
    )
    fields.update(overrides)
    return event_class(**fields)


class TestPaiementAccepté:
    def test_construit_une_command_de_complétion(self):
        result = build_transition_command(
            make_allocation(), make_event(), Direction.PAYMENT_ACCEPTED, now=NOW
        )

        assert result.value == TransitionCommand(
            order_id="mockOrderId",
            sku="mockSku",
            units=2,
            updated_at=NOW.isoformat(),
            from_status=AllocationStatus.ALLOCATED,
            to_status=AllocationStatus.COMPLETED,
            stock_delta=0,
        )
        assert not result.value.has_compensation


class TestPaiementRefusé:
    def test_construit_une_command_de_désallocation_avec_restockage(self):
        result = build_transition_command(
            make_allocation(units=7),
            make_event(events.PaymentRejected),
            Direction.PAYMENT_REJECTED,
            now=NOW,
        )

        command = result.value
        assert command.to_status == AllocationStatus.DEALLOCATED
        assert command.from_status == AllocationStatus.ALLOCATED
        assert command.stock_delta == 7
        assert command.has_compensation


class TestAllocationFaitFoi:
    def test_les_unités_de_l_allocation_sont_retenues(self):
        """Les unités et le prix de l'event ne sont pas comparés à l'allocation."""
        result = build_transition_command(
            make_allocation(units=5, price=Decimal("99.99")),
            make_event(events.PaymentRejected, units=1, price=Decimal("1")),
            Direction.PAYMENT_REJECTED,
        )

        assert outcome.is_success(result)
        assert result.value.units == 5
        assert result.value.stock_delta == 5

    def test_un_statut_terminal_n_empêche_pas_la_construction(self):
        """C'est l'écriture conditionnelle qui refusera la transition."""
        result = build_transition_command(
            make_allocation(status="COMPLETED"), make_event(), Direction.PAYMENT_ACCEPTED
        )
        assert result.value.from_status == AllocationStatus.ALLOCATED

    def test_horodate_avec_l_heure_courante(self):
        result = build_transition_command(make_allocation(), make_event(), Direction.PAYMENT_ACCEPTED)
        stamped = datetime.fromisoformat(result.value.updated_at)
        assert stamped.tzinfo is not None
        assert abs((datetime.now(timezone.utc) - stamped).total_seconds()) < 60

    def test_la_command_est_immuable(self):
        command = build_transition_command(
            make_allocation(), make_event(), Direction.PAYMENT_ACCEPTED
        ).value
        with pytest.raises(dataclasses.FrozenInstanceError):
            command.units = 10


class TestAllocationInvalide:
    @pytest.mark.parametrize(
        "overrides",
        [
            {"order_id": "abc"},
            {"sku": "   "},
            {"user_id": None},
            {"units": 0},
            {"units": "2"},
            {"price": Decimal("-1")},
            {"price": None},
            {"status": "UNKNOWN"},
            {"created_at": ""},
            {"updated_at": "abc"},
        ],
    )
    def test_allocation_relue_invalide(self, overrides):
        result = build_transition_command(
            make_allocation(**overrides), make_event(), Direction.PAYMENT_ACCEPTED
        )
        assert outcome.is_failure_of_kind(result, FailureKind.INVALID_ARGUMENTS)
        assert not outcome.is_failure_transient(result)

    def test_allocation_absente(self):
        result = build_transition_command(None, make_event(), Direction.PAYMENT_ACCEPTED)
        assert outcome.is_failure_of_kind(result, FailureKind.INVALID_ARGUMENTS)

    def test_event_d_une_autre_famille(self):
        result = build_transition_command(
            make_allocation(), make_event(events.PaymentRejected), Direction.PAYMENT_ACCEPTED
        )
        assert outcome.is_failure_of_kind(result, FailureKind.INVALID_ARGUMENTS)
        assert not outcome.is_failure_transient(result)
