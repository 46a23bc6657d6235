"""
FastAPI Backend for the PHU IMNCI service
Exposes the IMNCI classifiers, the overall disposition and one-shot assessments
"""

import logging
from datetime import date, datetime
from typing import Optional, Dict, Any, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from src.core.config import config
from src.core.imnci import (
    COLOR_DISPLAY,
    AssessmentError,
    AssessmentSession,
    AssessmentStep,
    ClassificationColor,
    ClassificationResult,
    CoughBreathingObservation,
    DangerSignsObservation,
    DiarrheaObservation,
    EarObservation,
    FeverObservation,
    HivStatus,
    ImmunizationStatus,
    NutritionObservation,
    OverallAssessment,
    ReferralUrgency,
    assess_cough_breathing,
    assess_danger_signs,
    assess_diarrhea,
    assess_ear_problem,
    assess_fever,
    assess_nutrition,
    age_in_months,
    calculate_overall_assessment,
)
from src.core.imnci.classifiers import has_danger_sign

logging.basicConfig(
    level=config.logging_config['level'],
    format=config.logging_config['format'],
)
logger = logging.getLogger("phu_imnci")

app = FastAPI(title=config.api_config['title'], version=config.api_config['version'])

# CORS middleware for the PHU frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.api_config['cors_origins'],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class HealthResponse(BaseModel):
    status: str
    timestamp: str


class ClassificationPayload(BaseModel):
    """A single domain classification, as returned and as accepted by /overall"""
    classification: str
    color: ClassificationColor
    requires_referral: bool
    urgency: Optional[ReferralUrgency] = None
    treatment: Optional[str] = None

    @classmethod
    def from_result(cls, result: ClassificationResult) -> "ClassificationPayload":
        return cls(**result.to_dict())

    def to_result(self) -> ClassificationResult:
        return ClassificationResult(
            classification=self.classification,
            color=self.color,
            requires_referral=self.requires_referral,
            urgency=self.urgency,
            treatment=self.treatment,
        )


class OverallAssessmentResponse(BaseModel):
    overall_classification: str
    overall_color: ClassificationColor
    requires_referral: bool
    referral_urgency: ReferralUrgency
    critical_findings: List[str]

    @classmethod
    def from_overall(cls, overall: OverallAssessment) -> "OverallAssessmentResponse":
        return cls(**overall.to_dict())


class ColorDisplayResponse(BaseModel):
    color: ClassificationColor
    bg_class: str
    text_class: str
    border_class: str
    label: str


class AssessmentRequest(BaseModel):
    """
    Request body for a complete assessment (any subset of steps)

    The session derives cough_breathing.age_in_months from the child's age and
    the cough/fever has_danger_signs and diarrhea lethargic_unconscious flags
    from danger_signs. Values that contradict them are rejected with 400.
    """
    age_in_months: Optional[int] = None
    date_of_birth: Optional[date] = None
    case_id: Optional[str] = None
    patient_id: Optional[str] = None
    clinician_id: Optional[str] = None
    danger_signs: Optional[DangerSignsObservation] = None
    cough_breathing: Optional[CoughBreathingObservation] = None
    diarrhea: Optional[DiarrheaObservation] = None
    fever: Optional[FeverObservation] = None
    ear: Optional[EarObservation] = None
    nutrition: Optional[NutritionObservation] = None
    immunization: Optional[ImmunizationStatus] = None
    hiv: Optional[HivStatus] = None


class AssessmentResponse(BaseModel):
    status: str
    results: Dict[str, ClassificationPayload]
    overall: OverallAssessmentResponse
    record: Dict[str, Any]


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now().isoformat()
    )


# ------------------------------------------------------------------
# Domain classifiers
# ------------------------------------------------------------------

@app.post("/api/imnci/danger-signs", response_model=ClassificationPayload)
async def classify_danger_signs(observation: DangerSignsObservation):
    return ClassificationPayload.from_result(assess_danger_signs(observation))


@app.post("/api/imnci/cough-breathing", response_model=ClassificationPayload)
async def classify_cough_breathing(observation: CoughBreathingObservation):
    return ClassificationPayload.from_result(assess_cough_breathing(observation))


@app.post("/api/imnci/diarrhea", response_model=ClassificationPayload)
async def classify_diarrhea(observation: DiarrheaObservation):
    return ClassificationPayload.from_result(assess_diarrhea(observation))


@app.post("/api/imnci/fever", response_model=ClassificationPayload)
async def classify_fever(observation: FeverObservation):
    return ClassificationPayload.from_result(assess_fever(observation))


@app.post("/api/imnci/ear", response_model=ClassificationPayload)
async def classify_ear(observation: EarObservation):
    return ClassificationPayload.from_result(assess_ear_problem(observation))


@app.post("/api/imnci/nutrition", response_model=ClassificationPayload)
async def classify_nutrition(observation: NutritionObservation):
    return ClassificationPayload.from_result(assess_nutrition(observation))


@app.post("/api/imnci/overall", response_model=OverallAssessmentResponse)
async def overall_assessment(classifications: List[ClassificationPayload]):
    """Combine domain classifications into the overall disposition"""
    overall = calculate_overall_assessment(c.to_result() for c in classifications)
    return OverallAssessmentResponse.from_overall(overall)


# ------------------------------------------------------------------
# Color lookup
# ------------------------------------------------------------------

def _color_response(color: ClassificationColor) -> ColorDisplayResponse:
    display = COLOR_DISPLAY[color]
    return ColorDisplayResponse(
        color=color,
        bg_class=display.bg_class,
        text_class=display.text_class,
        border_class=display.border_class,
        label=display.label,
    )


@app.get("/api/imnci/colors", response_model=List[ColorDisplayResponse])
async def list_colors():
    return [_color_response(color) for color in ClassificationColor]


@app.get("/api/imnci/colors/{color}", response_model=ColorDisplayResponse)
async def get_color(color: str):
    try:
        key = ClassificationColor(color.lower())
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown classification color: {color}")
    return _color_response(key)


# ------------------------------------------------------------------
# Complete assessment
# ------------------------------------------------------------------

_REQUEST_STEPS = (
    ("danger_signs", AssessmentStep.DANGER),
    ("cough_breathing", AssessmentStep.COUGH),
    ("diarrhea", AssessmentStep.DIARRHEA),
    ("fever", AssessmentStep.FEVER),
    ("ear", AssessmentStep.EAR),
    ("nutrition", AssessmentStep.NUTRITION),
)


def _assessment_age(request: AssessmentRequest) -> int:
    """Child's age: explicit, from birth date, else the cough step's own age."""
    if request.age_in_months is not None:
        return request.age_in_months
    if request.date_of_birth is not None:
        return age_in_months(request.date_of_birth)
    if request.cough_breathing is not None:
        return request.cough_breathing.age_in_months
    return 0


def _context_conflicts(request: AssessmentRequest, age: int) -> List[str]:
    """Step fields the session derives that contradict the rest of the request."""
    danger = request.danger_signs or DangerSignsObservation()
    conflicts = []

    cough = request.cough_breathing
    if cough is not None:
        if cough.age_in_months and cough.age_in_months != age:
            conflicts.append(
                f"cough_breathing.age_in_months={cough.age_in_months} "
                f"contradicts the child's age ({age} months)"
            )
        if cough.has_danger_signs and not has_danger_sign(danger):
            conflicts.append("cough_breathing.has_danger_signs is set but danger_signs has none")
    if request.fever is not None and request.fever.has_danger_signs and not has_danger_sign(danger):
        conflicts.append("fever.has_danger_signs is set but danger_signs has none")
    if (request.diarrhea is not None and request.diarrhea.lethargic_unconscious
            and not danger.lethargic_unconscious):
        conflicts.append(
            "diarrhea.lethargic_unconscious is set but danger_signs.lethargic_unconscious is not"
        )
    return conflicts


@app.post("/api/imnci/assessments", response_model=AssessmentResponse)
async def create_assessment(request: AssessmentRequest):
    """
    Run every supplied step through an AssessmentSession and complete it.
    Returns the record for the external record store plus the overall result.
    """
    age = _assessment_age(request)
    conflicts = _context_conflicts(request, age)
    if conflicts:
        logger.warning("Assessment rejected: %s", "; ".join(conflicts))
        raise HTTPException(status_code=400, detail="; ".join(conflicts))

    session = AssessmentSession(
        age_months=age,
        case_id=request.case_id,
        patient_id=request.patient_id,
        clinician_id=request.clinician_id,
        config=config.get_section('assessment'),
    )

    results: Dict[str, ClassificationPayload] = {}
    try:
        for field_name, step in _REQUEST_STEPS:
            observation = getattr(request, field_name)
            if observation is not None:
                result = session.classify(step, observation)
                results[field_name] = ClassificationPayload.from_result(result)

        if request.immunization is not None:
            session.record_immunization(request.immunization)
        if request.hiv is not None:
            session.record_hiv(request.hiv)

        overall = session.complete()
    except AssessmentError as e:
        logger.warning("Assessment rejected: %s", e)
        raise HTTPException(status_code=400, detail=str(e))

    return AssessmentResponse(
        status=session.status.value,
        results=results,
        overall=OverallAssessmentResponse.from_overall(overall),
        record=session.to_record(),
    )


if __name__ == "__main__":
    import uvicorn
    logger.info("Starting PHU IMNCI API Server on http://localhost:%s", config.api_config['port'])
    uvicorn.run(app, host=config.api_config['host'], port=config.api_config['port'], log_level="info")
