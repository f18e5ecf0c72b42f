"""
Configuration partagée pour les tests.

- `session_factory` : base SQLite en mémoire partagée par toutes les
  sessions d'un test (StaticPool), tables créées.
- `make_body` : construit le corps JSON d'un message tel que livré
  par le relais de flux de changements.
"""

import json
from decimal import Decimal

import pytest
from boto3.dynamodb.types import TypeSerializer
from sqlalchemy import create_engine, insert
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from inventory.adapters import orm

MOCK_DATE = "2024-10-19T03:24:00.000Z"


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    orm.metadata.create_all(engine)
    yield sessionmaker(bind=engine)
    engine.dispose()


@pytest.fixture
def add_allocation(session_factory):
    """Insère une allocation (et son stock d'entrepôt) en base."""

    def _add(order_id="mockOrderId", sku="mockSku", units=2, price=10.33,
             status="ALLOCATED", user_id="mockUserId", stock_units=10):
        with session_factory() as session:
            session.execute(insert(orm.allocations).values(
                order_id=order_id, sku=sku, user_id=user_id, units=units,
                price=price, status=status, created_at=MOCK_DATE, updated_at=MOCK_DATE,
            ))
            if stock_units is not None:
                session.execute(insert(orm.warehouse_stock).values(
                    sku=sku, units=stock_units, updated_at=MOCK_DATE,
                ))
            session.commit()

    return _add


def build_event(event_name="ORDER_PAYMENT_ACCEPTED_EVENT", **overrides):
    event_data = {
        "orderId": "mockOrderId",
        "sku": "mockSku",
        "units": 2,
        "price": 10.33,
        "userId": "mockUserId",
    }
    event_data.update(overrides)
    return {
        "eventName": event_name,
        "eventData": event_data,
        "createdAt": MOCK_DATE,
        "updatedAt": MOCK_DATE,
    }


def typed_image(event):
    """Encode un event comme le relais du flux : {"eventName": {"S": ...}, ...}."""

    def as_decimals(value):
        if isinstance(value, dict):
            return {key: as_decimals(item) for key, item in value.items()}
        if isinstance(value, float):
            return Decimal(str(value))
        return value

    serializer = TypeSerializer()
    return {key: serializer.serialize(as_decimals(value)) for key, value in event.items()}


def wrap_event(event):
    return json.dumps({
        "detail-type": "mockDetailType",
        "source": "mockSource",
        "detail": {
            "eventName": "INSERT",
            "eventSource": "aws:dynamodb",
            "dynamodb": {"NewImage": event},
        },
    })


@pytest.fixture
def make_event():
    return build_event


@pytest.fixture
def wrap():
    return wrap_event


@pytest.fixture
def make_typed_body():
    """make_typed_body(event_name, **eventData) -> corps JSON avec une NewImage typée."""

    def _make(event_name="ORDER_PAYMENT_ACCEPTED_EVENT", **overrides):
        return wrap_event(typed_image(build_event(event_name, **overrides)))

    return _make


@pytest.fixture
def make_body():
    """make_body(event_name, **eventData) -> corps JSON du message."""

    def _make(event_name="ORDER_PAYMENT_ACCEPTED_EVENT", **overrides):
        return wrap_event(build_event(event_name, **overrides))

    return _make
