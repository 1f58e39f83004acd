"""Shared pytest fixtures for the farmasiku tests."""

import os
import tempfile
from pathlib import Path

# Point the app at a throwaway SQLite file before farmasiku.config is imported
_TMP_DIR = tempfile.mkdtemp(prefix="farmasiku-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{Path(_TMP_DIR) / 'test.db'}"

import pytest  # noqa: E402

from farmasiku.persistence import PersistenceError, PersistenceService  # noqa: E402
from farmasiku.wizard import actions as a  # noqa: E402
from farmasiku.wizard.machine import WizardMachine  # noqa: E402
from farmasiku.wizard.schema import Assessment, PaymentInfo  # noqa: E402


FIXED_NOW = "2026-01-01T09:00:00+00:00"


class FakePersistence(PersistenceService):
    """In-memory store that records calls and can be told to fail."""

    def __init__(self):
        self.sessions = {}
        self.assessments = []
        self.orders = {}
        self.fail_sessions = False
        self.fail_writes = False
        self.fail_orders = False
        self._counter = 0

    def _next_id(self, prefix):
        self._counter += 1
        return f"{prefix}-{self._counter}"

    def create_session(self, metadata):
        if self.fail_sessions:
            raise PersistenceError("sessions unavailable")
        session_id = self._next_id("session")
        self.sessions[session_id] = dict(metadata)
        return session_id

    def update_session(self, session_id, fields):
        if self.fail_writes:
            raise PersistenceError("writes unavailable")
        self.sessions[session_id].update(fields)

    def get_session(self, session_id):
        return self.sessions.get(session_id)

    def save_assessment(self, record):
        if self.fail_writes:
            raise PersistenceError("writes unavailable")
        self.assessments.append(record)
        return self._next_id("assessment")

    def list_assessments(self, limit=100):
        return list(reversed(self.assessments))[:limit]

    def create_order(self, order):
        if self.fail_orders:
            raise PersistenceError("orders unavailable")
        order_id = self._next_id("order")
        self.orders[order_id] = dict(order)
        return order_id

    def get_order(self, order_id):
        return self.orders.get(order_id)

    def update_order_status(self, order_id, status):
        self.orders[order_id]["status"] = status

    def list_orders(self, limit=50):
        return list(self.orders.values())[:limit]

    def list_orders_by_email(self, email):
        return [o for o in self.orders.values() if o["customerInfo"]["email"] == email]

    def order_statistics(self):
        return {}

    def symptom_statistics(self):
        return {}

    def ping(self):
        return None


@pytest.fixture
def machine():
    """Wizard machine with a fixed clock."""
    return WizardMachine(clock=lambda: FIXED_NOW)


@pytest.fixture
def drive(machine):
    """Apply a sequence of actions and return the final state."""

    def _drive(state, *actions):
        for action in actions:
            state = machine.transition(state, action).state
        return state

    return _drive


@pytest.fixture
def fake_persistence():
    return FakePersistence()


@pytest.fixture
def payment():
    return PaymentInfo(
        name="Aisyah Rahman",
        email="aisyah@example.com",
        phone="+60123456789",
        address="12 Jalan Ampang, Kuala Lumpur",
        payment_method="card",
    )


@pytest.fixture
def headache_assessment():
    return Assessment(symptom="headache", severity="mild", duration="1 day")


@pytest.fixture
def to_symptom_step():
    """Actions that take a fresh wizard to the symptom step on 'head'."""
    return (a.SubmitAge(age=30), a.ChooseBodyPart(body_part="head"))


@pytest.fixture
def sql_persistence():
    """SQLAlchemy store on the test database, emptied after each test."""
    from farmasiku.db import Base, engine
    from farmasiku.persistence import SqlPersistenceService, init_db

    init_db()
    yield SqlPersistenceService()

    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())
