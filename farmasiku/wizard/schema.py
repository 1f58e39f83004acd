# farmasiku/wizard/schema.py
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


class Assessment(BaseModel):
    """
    Follow-up answers for one selected symptom.

    Only `symptom` is required; the assessment screen may send any
    other answers and they are kept verbatim.
    """

    symptom: str = Field(..., description="Symptom id this assessment belongs to")
    severity: Optional[str] = Field(
        None,
        description="e.g. 'mild', 'moderate', 'severe'",
    )
    duration: Optional[str] = Field(None, description="Free-text duration, e.g. '2 days'")
    notes: Optional[str] = None

    model_config = {
        "extra": "allow",
        "frozen": True,
    }


class PaymentInfo(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    payment_method: Literal["card", "online_banking", "ewallet", "cash_on_delivery"] = "card"

    model_config = {
        "frozen": True,
    }
