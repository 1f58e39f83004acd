"""
Tests for the SQLAlchemy persistence service.
"""

import pytest
from sqlalchemy.exc import OperationalError

from farmasiku.persistence import PersistenceError, SqlPersistenceService


def _order(email="aisyah@example.com", total=8.5):
    return {
        "sessionId": None,
        "symptoms": ["headache"],
        "medications": [{"id": "paracetamol-500", "price": total}],
        "customerInfo": {"name": "Aisyah", "email": email, "phone": "1", "address": "KL"},
        "paymentMethod": "card",
        "totalAmount": total,
        "status": "pending",
    }


def test_session_create_update_get(sql_persistence):
    session_id = sql_persistence.create_session({"startedAt": "now", "platform": "web"})

    sql_persistence.update_session(session_id, {"userAge": 30})
    sql_persistence.update_session(session_id, {"selectedBodyPart": "head"})

    session = sql_persistence.get_session(session_id)
    assert session["id"] == session_id
    assert session["platform"] == "web"
    assert session["userAge"] == 30
    assert session["selectedBodyPart"] == "head"
    assert session["createdAt"] is not None


def test_get_missing_session(sql_persistence):
    assert sql_persistence.get_session("nope") is None


def test_update_missing_session_fails(sql_persistence):
    with pytest.raises(PersistenceError):
        sql_persistence.update_session("nope", {"userAge": 30})


def test_orders(sql_persistence):
    first = sql_persistence.create_order(_order())
    second = sql_persistence.create_order(_order(email="other@example.com", total=20.0))

    order = sql_persistence.get_order(first)
    assert order["id"] == first
    assert order["status"] == "pending"
    assert order["totalAmount"] == 8.5
    assert order["customerInfo"]["name"] == "Aisyah"

    assert {o["id"] for o in sql_persistence.list_orders()} == {first, second}
    assert [o["id"] for o in sql_persistence.list_orders_by_email("other@example.com")] == [second]
    assert sql_persistence.get_order("nope") is None


def test_update_order_status(sql_persistence):
    order_id = sql_persistence.create_order(_order())

    sql_persistence.update_order_status(order_id, "shipped")

    assert sql_persistence.get_order(order_id)["status"] == "shipped"


def test_update_order_status_rejects_unknown_status(sql_persistence):
    order_id = sql_persistence.create_order(_order())

    with pytest.raises(ValueError):
        sql_persistence.update_order_status(order_id, "lost")


def test_update_missing_order_fails(sql_persistence):
    with pytest.raises(PersistenceError):
        sql_persistence.update_order_status("nope", "shipped")


def test_order_statistics(sql_persistence):
    assert sql_persistence.order_statistics()["totalOrders"] == 0
    assert sql_persistence.order_statistics()["averageOrderValue"] == 0

    sql_persistence.create_order(_order(total=10.0))
    cancelled = sql_persistence.create_order(_order(total=20.0))
    sql_persistence.update_order_status(cancelled, "cancelled")

    stats = sql_persistence.order_statistics()
    assert stats["totalOrders"] == 2
    assert stats["totalRevenue"] == 30.0
    assert stats["averageOrderValue"] == 15.0
    assert stats["statusCount"]["pending"] == 1
    assert stats["statusCount"]["cancelled"] == 1
    assert stats["statusCount"]["delivered"] == 0


def test_assessments_and_symptom_statistics(sql_persistence):
    for symptom, body_part in [("headache", "head"), ("headache", "head"), ("cough", "throat")]:
        sql_persistence.save_assessment(
            {
                "sessionId": "s1",
                "userAge": 30,
                "bodyPart": body_part,
                "symptom": symptom,
                "assessment": {"symptom": symptom},
            }
        )

    records = sql_persistence.list_assessments()
    assert len(records) == 3
    assert records[0]["sessionId"] == "s1"
    assert len(sql_persistence.list_assessments(limit=2)) == 2

    stats = sql_persistence.symptom_statistics()
    assert stats == {
        "symptomCount": {"headache": 2, "cough": 1},
        "bodyPartCount": {"head": 2, "throat": 1},
        "totalAssessments": 3,
    }


def test_ping(sql_persistence):
    sql_persistence.ping()


def test_database_errors_become_persistence_errors():
    def broken_factory():
        raise OperationalError("SELECT 1", {}, Exception("database is down"))

    service = SqlPersistenceService(session_factory=broken_factory)

    with pytest.raises(PersistenceError):
        service.create_session({})
    with pytest.raises(PersistenceError):
        service.ping()
