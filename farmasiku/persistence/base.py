# farmasiku/persistence/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class PersistenceError(RuntimeError):
    """
    The store could not be reached or refused the write/read.
    """


class PersistenceService(ABC):
    """
    Storage for wizard sessions, symptom assessments and orders.

    Records are plain JSON-able dicts so the wizard never depends on
    the storage backend. Every method raises PersistenceError on failure.
    """

    # ---- sessions ----------------------------------------------------

    @abstractmethod
    def create_session(self, metadata: Dict[str, Any]) -> str:
        ...

    @abstractmethod
    def update_session(self, session_id: str, fields: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    def get_session(self, session_id: str) -> Optional[Dict[str, Any]]:
        ...

    # ---- assessments -------------------------------------------------

    @abstractmethod
    def save_assessment(self, record: Dict[str, Any]) -> str:
        ...

    @abstractmethod
    def list_assessments(self, limit: int = 100) -> List[Dict[str, Any]]:
        ...

    # ---- orders ------------------------------------------------------

    @abstractmethod
    def create_order(self, order: Dict[str, Any]) -> str:
        ...

    @abstractmethod
    def get_order(self, order_id: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def update_order_status(self, order_id: str, status: str) -> None:
        ...

    @abstractmethod
    def list_orders(self, limit: int = 50) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def list_orders_by_email(self, email: str) -> List[Dict[str, Any]]:
        ...

    # ---- analytics ---------------------------------------------------

    @abstractmethod
    def order_statistics(self) -> Dict[str, Any]:
        ...

    @abstractmethod
    def symptom_statistics(self) -> Dict[str, Any]:
        ...

    @abstractmethod
    def ping(self) -> None:
        """
        Raise PersistenceError if the store is unreachable.
        """
        ...
