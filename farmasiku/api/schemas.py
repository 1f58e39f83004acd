# farmasiku/api/schemas.py
from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from farmasiku import catalog
from farmasiku.catalog.schema import Medication, SymptomInfo
from farmasiku.wizard import actions as a
from farmasiku.wizard.danger import dangerous_selected
from farmasiku.wizard.schema import Assessment, PaymentInfo
from farmasiku.wizard.state import WizardState
from farmasiku.wizard.steps import WizardStep, get_step_info, has_back


# ---- Wizard actions ---------------------------------------------------------


class SubmitAgeRequest(BaseModel):
    type: Literal["submit_age"]
    age: int

    def to_action(self) -> a.Action:
        return a.SubmitAge(age=self.age)


class ChooseBodyPartRequest(BaseModel):
    type: Literal["choose_body_part"]
    body_part: str

    def to_action(self) -> a.Action:
        return a.ChooseBodyPart(body_part=self.body_part)


class ToggleSymptomRequest(BaseModel):
    type: Literal["toggle_symptom"]
    symptom: str

    def to_action(self) -> a.Action:
        return a.ToggleSymptom(symptom=self.symptom)


class MoreSymptomsRequest(BaseModel):
    type: Literal["more_symptoms"]

    def to_action(self) -> a.Action:
        return a.RequestMoreSymptoms()


class StartAssessmentRequest(BaseModel):
    type: Literal["start_assessment"]
    symptom: str

    def to_action(self) -> a.Action:
        return a.StartAssessment(symptom=self.symptom)


class CompleteSelectionRequest(BaseModel):
    type: Literal["complete_selection"]

    def to_action(self) -> a.Action:
        return a.CompleteSelection()


class DangerConsultationRequest(BaseModel):
    type: Literal["danger_consultation"]

    def to_action(self) -> a.Action:
        return a.DangerGoToConsultation()


class DangerContinueRequest(BaseModel):
    type: Literal["danger_continue"]

    def to_action(self) -> a.Action:
        return a.DangerContinue()


class SubmitAssessmentRequest(BaseModel):
    type: Literal["submit_assessment"]
    assessment: Assessment

    def to_action(self) -> a.Action:
        return a.SubmitAssessment(assessment=self.assessment)


class ConfirmSymptomsRequest(BaseModel):
    type: Literal["confirm_symptoms"]
    is_more_severe: bool

    def to_action(self) -> a.Action:
        return a.ConfirmSymptoms(is_more_severe=self.is_more_severe)


class ChooseMedicationsRequest(BaseModel):
    type: Literal["choose_medications"]
    medication_ids: List[str] = Field(default_factory=list)

    def to_action(self) -> a.Action:
        return a.ChooseMedications(medication_ids=tuple(self.medication_ids))


class SubmitPaymentRequest(BaseModel):
    type: Literal["submit_payment"]
    payment: PaymentInfo

    def to_action(self) -> a.Action:
        return a.SubmitPayment(payment=self.payment)


class BackRequest(BaseModel):
    type: Literal["back"]

    def to_action(self) -> a.Action:
        return a.Back()


class ResetRequest(BaseModel):
    type: Literal["reset"]

    def to_action(self) -> a.Action:
        return a.Reset()


ActionPayload = Annotated[
    Union[
        SubmitAgeRequest,
        ChooseBodyPartRequest,
        ToggleSymptomRequest,
        MoreSymptomsRequest,
        StartAssessmentRequest,
        CompleteSelectionRequest,
        DangerConsultationRequest,
        DangerContinueRequest,
        SubmitAssessmentRequest,
        ConfirmSymptomsRequest,
        ChooseMedicationsRequest,
        SubmitPaymentRequest,
        BackRequest,
        ResetRequest,
    ],
    Field(discriminator="type"),
]


class WizardActionRequest(BaseModel):
    action: ActionPayload


class StartWizardRequest(BaseModel):
    user_agent: Optional[str] = None
    platform: Optional[str] = None


# ---- Wizard view ------------------------------------------------------------


class StepInfoSchema(BaseModel):
    number: int
    total: int
    name: str


class WizardView(BaseModel):
    """
    Everything a front end needs to render the current screen.
    """

    wizard_id: str
    step: WizardStep
    step_info: StepInfoSchema
    can_go_back: bool

    user_age: Optional[int]
    selected_body_part: Optional[str]
    current_body_part: Optional[str]
    is_selecting_more: bool
    available_symptoms: List[SymptomInfo]

    selected_symptoms: List[str]
    symptom_assessments: Dict[str, Assessment]
    current_symptom_for_assessment: Optional[str]

    show_danger_warning: bool
    dangerous_symptoms: List[str]

    recommended_medications: List[Medication]
    selected_medications: List[Medication]
    total_price: float

    session_id: Optional[str]
    last_order_id: Optional[str]
    error: Optional[str]

    @classmethod
    def from_state(cls, wizard_id: str, state: WizardState) -> "WizardView":
        info = get_step_info(state.step)
        browsing = state.current_body_part or state.selected_body_part

        recommended: List[Medication] = []
        if state.step == WizardStep.MEDICATION:
            recommended = catalog.medications_for(state.selected_symptoms, state.user_age)

        return cls(
            wizard_id=wizard_id,
            step=state.step,
            step_info=StepInfoSchema(number=info.number, total=info.total, name=info.name),
            can_go_back=has_back(state.step),
            user_age=state.user_age,
            selected_body_part=state.selected_body_part,
            current_body_part=state.current_body_part,
            is_selecting_more=state.is_selecting_more,
            available_symptoms=catalog.SYMPTOMS_BY_BODY_PART.get(browsing, []) if browsing else [],
            selected_symptoms=list(state.selected_symptoms),
            symptom_assessments=dict(state.symptom_assessments),
            current_symptom_for_assessment=state.current_symptom_for_assessment,
            show_danger_warning=state.show_danger_warning,
            dangerous_symptoms=list(
                dangerous_selected(state.selected_symptoms, catalog.DANGEROUS_SYMPTOMS)
            ),
            recommended_medications=recommended,
            selected_medications=list(state.selected_medications),
            total_price=state.total_price,
            session_id=state.session_id,
            last_order_id=state.last_order_id,
            error=state.error,
        )


# ---- Orders & analytics -----------------------------------------------------


class OrderStatusUpdateRequest(BaseModel):
    status: Literal["pending", "confirmed", "processing", "shipped", "delivered", "cancelled"]


class OrderStatisticsResponse(BaseModel):
    totalOrders: int
    totalRevenue: float
    statusCount: Dict[str, int]
    averageOrderValue: float


class SymptomStatisticsResponse(BaseModel):
    symptomCount: Dict[str, int]
    bodyPartCount: Dict[str, int]
    totalAssessments: int


# Orders and assessments are returned as stored documents
Document = Dict[str, Any]
