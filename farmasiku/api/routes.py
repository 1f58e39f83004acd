# farmasiku/api/routes.py
from __future__ import annotations

import logging
from functools import lru_cache
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from farmasiku import catalog
from farmasiku.catalog.schema import BodyPart, SymptomInfo
from farmasiku.persistence import PersistenceError, PersistenceService, SqlPersistenceService
from farmasiku.services import WizardSessionService
from farmasiku.wizard.errors import InvalidTransitionError
from .schemas import (
    Document,
    OrderStatisticsResponse,
    OrderStatusUpdateRequest,
    StartWizardRequest,
    SymptomStatisticsResponse,
    WizardActionRequest,
    WizardView,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache(maxsize=1)
def get_persistence() -> PersistenceService:
    return SqlPersistenceService()


@lru_cache(maxsize=1)
def get_wizard_service() -> WizardSessionService:
    return WizardSessionService(persistence=get_persistence())


def _unavailable(exc: PersistenceError) -> HTTPException:
    return HTTPException(status_code=503, detail=str(exc))


# ---- Catalog ----------------------------------------------------------------


@router.get("/catalog/body-parts", response_model=List[BodyPart])
def list_body_parts() -> List[BodyPart]:
    return catalog.BODY_PARTS


@router.get("/catalog/body-parts/{body_part_id}/symptoms", response_model=List[SymptomInfo])
def list_symptoms(body_part_id: str) -> List[SymptomInfo]:
    if catalog.get_body_part(body_part_id) is None:
        raise HTTPException(status_code=404, detail="Body part not found.")
    return catalog.SYMPTOMS_BY_BODY_PART.get(body_part_id, [])


# ---- Wizard -----------------------------------------------------------------


@router.post("/wizard/start", response_model=WizardView)
def start_wizard(
    background_tasks: BackgroundTasks,
    payload: Optional[StartWizardRequest] = None,
    service: WizardSessionService = Depends(get_wizard_service),
) -> WizardView:
    """
    Start a new symptom-checker run on the age step.
    """
    metadata = {}
    if payload is not None:
        metadata = {
            k: v
            for k, v in {"userAgent": payload.user_agent, "platform": payload.platform}.items()
            if v is not None
        }

    wizard_id, state = service.start(metadata, defer=background_tasks.add_task)
    return WizardView.from_state(wizard_id, state)


@router.get("/wizard/{wizard_id}", response_model=WizardView)
def get_wizard(
    wizard_id: str,
    service: WizardSessionService = Depends(get_wizard_service),
) -> WizardView:
    state = service.get_state(wizard_id)
    if state is None:
        raise HTTPException(
            status_code=404,
            detail="Wizard not found. Start a new symptom check.",
        )
    return WizardView.from_state(wizard_id, state)


@router.post("/wizard/{wizard_id}/actions", response_model=WizardView)
def wizard_action(
    wizard_id: str,
    payload: WizardActionRequest,
    background_tasks: BackgroundTasks,
    service: WizardSessionService = Depends(get_wizard_service),
) -> WizardView:
    """
    Apply one user action. Validation problems come back in `error`
    with a 200; actions that make no sense at the current step are a 409.
    """
    if service.get_state(wizard_id) is None:
        raise HTTPException(
            status_code=404,
            detail="Wizard not found. Start a new symptom check.",
        )

    try:
        state = service.dispatch(
            wizard_id,
            payload.action.to_action(),
            defer=background_tasks.add_task,
        )
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc))

    return WizardView.from_state(wizard_id, state)


# ---- Orders -----------------------------------------------------------------


@router.get("/orders", response_model=List[Document])
def list_orders(
    email: Optional[str] = None,
    limit: int = 50,
    persistence: PersistenceService = Depends(get_persistence),
) -> List[Document]:
    try:
        if email:
            return persistence.list_orders_by_email(email)
        return persistence.list_orders(limit=limit)
    except PersistenceError as exc:
        raise _unavailable(exc)


@router.get("/orders/{order_id}", response_model=Document)
def get_order(
    order_id: str,
    persistence: PersistenceService = Depends(get_persistence),
) -> Document:
    try:
        order = persistence.get_order(order_id)
    except PersistenceError as exc:
        raise _unavailable(exc)

    if order is None:
        raise HTTPException(status_code=404, detail="Order not found.")
    return order


@router.patch("/orders/{order_id}/status", response_model=Document)
def update_order_status(
    order_id: str,
    payload: OrderStatusUpdateRequest,
    persistence: PersistenceService = Depends(get_persistence),
) -> Document:
    try:
        if persistence.get_order(order_id) is None:
            raise HTTPException(status_code=404, detail="Order not found.")
        persistence.update_order_status(order_id, payload.status)
        logger.info("Order %s moved to %s", order_id, payload.status)
        return persistence.get_order(order_id)
    except PersistenceError as exc:
        raise _unavailable(exc)


# ---- Assessments & analytics ------------------------------------------------


@router.get("/assessments", response_model=List[Document])
def list_assessments(
    limit: int = 100,
    persistence: PersistenceService = Depends(get_persistence),
) -> List[Document]:
    try:
        return persistence.list_assessments(limit=limit)
    except PersistenceError as exc:
        raise _unavailable(exc)


@router.get("/stats/orders", response_model=OrderStatisticsResponse)
def order_statistics(
    persistence: PersistenceService = Depends(get_persistence),
) -> OrderStatisticsResponse:
    try:
        return OrderStatisticsResponse(**persistence.order_statistics())
    except PersistenceError as exc:
        raise _unavailable(exc)


@router.get("/stats/symptoms", response_model=SymptomStatisticsResponse)
def symptom_statistics(
    persistence: PersistenceService = Depends(get_persistence),
) -> SymptomStatisticsResponse:
    try:
        return SymptomStatisticsResponse(**persistence.symptom_statistics())
    except PersistenceError as exc:
        raise _unavailable(exc)
