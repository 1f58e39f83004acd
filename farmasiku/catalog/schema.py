# farmasiku/catalog/schema.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class BodyPart(BaseModel):
    id: str = Field(..., description="Body part id, e.g. 'head'")
    name: str
    icon: Optional[str] = None


class SymptomInfo(BaseModel):
    id: str = Field(..., description="Symptom id, e.g. 'headache'")
    name: str
    body_part: str


class Medication(BaseModel):
    id: str
    name: str
    price: float
    description: Optional[str] = None
    dosage: Optional[str] = None
    # Symptom ids this product is recommended for
    symptoms: List[str] = Field(default_factory=list)
    min_age: int = 0
    max_age: Optional[int] = None

    model_config = {
        "frozen": True,
    }

    def suitable_for_age(self, age: Optional[int]) -> bool:
        if age is None:
            return True
        if age < self.min_age:
            return False
        return self.max_age is None or age <= self.max_age
