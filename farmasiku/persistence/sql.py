# farmasiku/persistence/sql.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from farmasiku.db import SessionLocal, engine, Base
from farmasiku.models import ORDER_STATUSES, Order, SymptomAssessmentRecord, UserSession
from farmasiku.persistence.base import PersistenceError, PersistenceService

logger = logging.getLogger(__name__)


@contextmanager
def db_session(factory: Callable[[], Session] = SessionLocal) -> Iterator[Session]:
    db = factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """
    Create all tables. Call this once at startup.
    """
    Base.metadata.create_all(bind=engine)


@contextmanager
def _translate_errors(what: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Error %s: %s", what, exc)
        raise PersistenceError(f"Error {what}") from exc


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _session_to_dict(row: UserSession) -> Dict[str, Any]:
    return {
        **row.data,
        "id": row.id,
        "createdAt": _iso(row.created_at),
        "updatedAt": _iso(row.updated_at),
    }


def _assessment_to_dict(row: SymptomAssessmentRecord) -> Dict[str, Any]:
    return {
        "id": row.id,
        "sessionId": row.session_id,
        "userAge": row.user_age,
        "bodyPart": row.body_part,
        "symptom": row.symptom,
        "assessment": row.assessment,
        "createdAt": _iso(row.created_at),
    }


def _order_to_dict(row: Order) -> Dict[str, Any]:
    return {
        **row.data,
        "id": row.id,
        "status": row.status,
        "totalAmount": row.total_amount,
        "createdAt": _iso(row.created_at),
        "updatedAt": _iso(row.updated_at),
    }


class SqlPersistenceService(PersistenceService):
    """
    SQLAlchemy-backed store. Each call runs in its own transaction.
    """

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory

    def _session(self):
        return db_session(self.session_factory)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def create_session(self, metadata: Dict[str, Any]) -> str:
        with _translate_errors("creating user session"), self._session() as db:
            row = UserSession(data=dict(metadata))
            db.add(row)
            db.flush()  # to get row.id
            return row.id

    def update_session(self, session_id: str, fields: Dict[str, Any]) -> None:
        with _translate_errors("updating user session"), self._session() as db:
            row = db.get(UserSession, session_id)
            if row is None:
                raise PersistenceError(f"User session {session_id} not found")
            # Reassign so the JSON column is flagged as changed
            row.data = {**row.data, **fields}

    def get_session(self, session_id: str) -> Optional[Dict[str, Any]]:
        with _translate_errors("getting user session"), self._session() as db:
            row = db.get(UserSession, session_id)
            return _session_to_dict(row) if row is not None else None

    # ------------------------------------------------------------------
    # Assessments
    # ------------------------------------------------------------------

    def save_assessment(self, record: Dict[str, Any]) -> str:
        with _translate_errors("saving symptom assessment"), self._session() as db:
            row = SymptomAssessmentRecord(
                session_id=record.get("sessionId"),
                user_age=record.get("userAge"),
                body_part=record.get("bodyPart"),
                symptom=record["symptom"],
                assessment=record.get("assessment") or {},
            )
            db.add(row)
            db.flush()
            return row.id

    def list_assessments(self, limit: int = 100) -> List[Dict[str, Any]]:
        with _translate_errors("getting symptom assessments"), self._session() as db:
            stmt = (
                select(SymptomAssessmentRecord)
                .order_by(SymptomAssessmentRecord.created_at.desc())
                .limit(limit)
            )
            return [_assessment_to_dict(r) for r in db.scalars(stmt)]

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def create_order(self, order: Dict[str, Any]) -> str:
        customer = order.get("customerInfo") or {}
        with _translate_errors("creating order"), self._session() as db:
            row = Order(
                session_id=order.get("sessionId"),
                customer_email=customer.get("email"),
                total_amount=float(order.get("totalAmount") or 0.0),
                status="pending",
                data={k: v for k, v in order.items() if k not in ("status", "totalAmount")},
            )
            db.add(row)
            db.flush()
            return row.id

    def get_order(self, order_id: str) -> Optional[Dict[str, Any]]:
        with _translate_errors("getting order"), self._session() as db:
            row = db.get(Order, order_id)
            return _order_to_dict(row) if row is not None else None

    def update_order_status(self, order_id: str, status: str) -> None:
        if status not in ORDER_STATUSES:
            raise ValueError(f"Unknown order status '{status}'")

        with _translate_errors("updating order status"), self._session() as db:
            row = db.get(Order, order_id)
            if row is None:
                raise PersistenceError(f"Order {order_id} not found")
            row.status = status

    def list_orders(self, limit: int = 50) -> List[Dict[str, Any]]:
        with _translate_errors("getting all orders"), self._session() as db:
            stmt = select(Order).order_by(Order.created_at.desc()).limit(limit)
            return [_order_to_dict(r) for r in db.scalars(stmt)]

    def list_orders_by_email(self, email: str) -> List[Dict[str, Any]]:
        with _translate_errors("getting orders by email"), self._session() as db:
            stmt = (
                select(Order)
                .where(Order.customer_email == email)
                .order_by(Order.created_at.desc())
            )
            return [_order_to_dict(r) for r in db.scalars(stmt)]

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    def order_statistics(self) -> Dict[str, Any]:
        with _translate_errors("getting order statistics"), self._session() as db:
            rows = list(db.scalars(select(Order)))

        total_orders = len(rows)
        total_revenue = round(sum(r.total_amount or 0.0 for r in rows), 2)
        status_count = {status: 0 for status in ORDER_STATUSES}
        for r in rows:
            status_count[r.status] = status_count.get(r.status, 0) + 1

        return {
            "totalOrders": total_orders,
            "totalRevenue": total_revenue,
            "statusCount": status_count,
            "averageOrderValue": round(total_revenue / total_orders, 2) if total_orders else 0,
        }

    def symptom_statistics(self) -> Dict[str, Any]:
        with _translate_errors("getting symptom statistics"), self._session() as db:
            rows = list(db.scalars(select(SymptomAssessmentRecord)))

        symptom_count: Dict[str, int] = {}
        body_part_count: Dict[str, int] = {}
        for r in rows:
            symptom_count[r.symptom] = symptom_count.get(r.symptom, 0) + 1
            if r.body_part:
                body_part_count[r.body_part] = body_part_count.get(r.body_part, 0) + 1

        return {
            "symptomCount": symptom_count,
            "bodyPartCount": body_part_count,
            "totalAssessments": len(rows),
        }

    def ping(self) -> None:
        with _translate_errors("checking database connection"), self._session() as db:
            db.execute(text("SELECT 1"))
