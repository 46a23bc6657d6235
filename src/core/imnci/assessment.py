"""
Step-by-step IMNCI assessment.

An AssessmentSession walks one child through the IMNCI steps, classifying each
domain as its observations arrive and producing the flat assessment record
that the record store persists.
"""

import logging
from dataclasses import replace
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from .aggregator import calculate_overall_assessment
from .classifiers import (
    assess_cough_breathing,
    assess_danger_signs,
    assess_diarrhea,
    assess_ear_problem,
    assess_fever,
    assess_nutrition,
    has_danger_sign,
)
from .models import (
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
    observation_to_dict,
)

logger = logging.getLogger(__name__)


class AssessmentError(ValueError):
    """Raised when an assessment session is used out of order."""


class AssessmentStep(str, Enum):
    DANGER = "danger"
    COUGH = "cough"
    DIARRHEA = "diarrhea"
    FEVER = "fever"
    EAR = "ear"
    NUTRITION = "nutrition"
    IMMUNIZATION = "immunization"
    SUMMARY = "summary"


class AssessmentStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


STEPS: List[AssessmentStep] = list(AssessmentStep)

# Registry: step -> (observation type, classifier)
_CLASSIFIERS: Dict[AssessmentStep, Tuple[Type, Callable[[Any], ClassificationResult]]] = {
    AssessmentStep.DANGER: (DangerSignsObservation, assess_danger_signs),
    AssessmentStep.COUGH: (CoughBreathingObservation, assess_cough_breathing),
    AssessmentStep.DIARRHEA: (DiarrheaObservation, assess_diarrhea),
    AssessmentStep.FEVER: (FeverObservation, assess_fever),
    AssessmentStep.EAR: (EarObservation, assess_ear_problem),
    AssessmentStep.NUTRITION: (NutritionObservation, assess_nutrition),
}

# Steps whose observations carry danger-sign context
_DANGER_DEPENDENT = (AssessmentStep.COUGH, AssessmentStep.DIARRHEA, AssessmentStep.FEVER)

# Record column layout per classified step: (completed flag, classification
# column prefix, observation field renames, fields not stored)
_RECORD_LAYOUT = {
    AssessmentStep.DANGER: ("danger_signs_completed", None, {}, set()),
    AssessmentStep.COUGH: (
        "cough_breathing_completed", "cough", {}, {"age_in_months", "has_danger_signs"},
    ),
    AssessmentStep.DIARRHEA: (
        "diarrhea_completed",
        "diarrhea",
        {"not_able_to_drink": "not_able_to_drink_diarrhea"},
        {"lethargic_unconscious"},
    ),
    AssessmentStep.FEVER: ("fever_completed", "fever", {}, {"has_danger_signs"}),
    AssessmentStep.EAR: ("ear_completed", "ear", {}, set()),
    AssessmentStep.NUTRITION: ("nutrition_completed", "nutrition", {}, set()),
}


def age_in_months(date_of_birth: Optional[date], today: Optional[date] = None) -> int:
    """Whole calendar months elapsed since birth (0 if birth date unknown)."""
    if date_of_birth is None:
        return 0
    today = today or date.today()
    months = (today.year - date_of_birth.year) * 12 + (today.month - date_of_birth.month)
    if today.day < date_of_birth.day:
        months -= 1
    return months


class AssessmentSession:
    """
    Holds one in-progress IMNCI assessment.

    The session owns the context that several steps share: the danger-signs
    step feeds the cough and fever "danger signs" flag and the diarrhea
    "lethargic/unconscious" flag, and the child's age feeds the cough
    classifier. Callers pass plain observations; the session fills these in.
    """

    def __init__(self,
                 age_months: int = 0,
                 case_id: str = None,
                 patient_id: str = None,
                 clinician_id: str = None,
                 config: Dict[str, Any] = None):
        self.age_months = age_months
        self.case_id = case_id
        self.patient_id = patient_id
        self.clinician_id = clinician_id
        self.config = config or {}
        self.status = AssessmentStatus.IN_PROGRESS

        self._observations: Dict[AssessmentStep, Any] = {}
        self._results: Dict[AssessmentStep, ClassificationResult] = {}
        self._immunization: Optional[ImmunizationStatus] = None
        self._hiv: Optional[HivStatus] = None
        self._overall: Optional[OverallAssessment] = None

    @classmethod
    def for_patient(cls, date_of_birth: Optional[date], today: Optional[date] = None, **kwargs):
        return cls(age_months=age_in_months(date_of_birth, today), **kwargs)

    # ------------------------------------------------------------------
    # Shared context
    # ------------------------------------------------------------------

    @property
    def danger_signs(self) -> DangerSignsObservation:
        return self._observations.get(AssessmentStep.DANGER, DangerSignsObservation())

    @property
    def has_danger_signs(self) -> bool:
        return has_danger_sign(self.danger_signs)

    def _with_context(self, step: AssessmentStep, observation):
        if step == AssessmentStep.COUGH:
            return replace(
                observation,
                age_in_months=self.age_months,
                has_danger_signs=self.has_danger_signs,
            )
        if step == AssessmentStep.DIARRHEA:
            return replace(
                observation,
                lethargic_unconscious=self.danger_signs.lethargic_unconscious,
            )
        if step == AssessmentStep.FEVER:
            return replace(observation, has_danger_signs=self.has_danger_signs)
        return observation

    # ------------------------------------------------------------------
    # Recording steps
    # ------------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self.status == AssessmentStatus.COMPLETED:
            raise AssessmentError("Assessment is already completed")

    def classify(self, step, observation) -> ClassificationResult:
        """Classify one domain step and store its result, replacing any earlier one."""
        self._ensure_open()
        step = self._step(step)

        if step not in _CLASSIFIERS:
            raise AssessmentError(f"Step '{step.value}' has no classifier")

        expected_type, classifier = _CLASSIFIERS[step]
        if not isinstance(observation, expected_type):
            raise AssessmentError(
                f"Step '{step.value}' expects {expected_type.__name__}, "
                f"got {type(observation).__name__}"
            )

        result = self._store(step, observation, classifier)

        # Danger signs changed: refresh steps that already used them
        if step == AssessmentStep.DANGER:
            for dependent in _DANGER_DEPENDENT:
                if dependent in self._observations:
                    self._store(dependent, self._observations[dependent],
                                _CLASSIFIERS[dependent][1])

        return result

    def _store(self, step: AssessmentStep, observation, classifier) -> ClassificationResult:
        observation = self._with_context(step, observation)
        result = classifier(observation)
        self._observations[step] = observation
        self._results[step] = result
        logger.debug("Step %s classified: %s (%s)",
                     step.value, result.classification, result.color.value)
        return result

    def record_immunization(self, status: ImmunizationStatus) -> None:
        self._ensure_open()
        self._immunization = status

    def record_hiv(self, status: HivStatus) -> None:
        self._ensure_open()
        self._hiv = status

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def result_for(self, step) -> Optional[ClassificationResult]:
        return self._results.get(self._step(step))

    @staticmethod
    def _step(step) -> AssessmentStep:
        try:
            return AssessmentStep(step)
        except ValueError:
            raise AssessmentError(f"Unknown assessment step: {step}") from None

    @property
    def results(self) -> List[ClassificationResult]:
        """Stored results in step order."""
        return [self._results[s] for s in STEPS if s in self._results]

    def overall(self) -> OverallAssessment:
        if self._overall is not None:
            return self._overall
        return calculate_overall_assessment(self.results)

    def treatment_recommendations(self) -> str:
        separator = self.config.get("treatment_separator", "\n\n")
        return separator.join(r.treatment for r in self.results if r.treatment)

    def complete(self) -> OverallAssessment:
        """Finalize the assessment and return the overall disposition."""
        self._ensure_open()
        self._overall = calculate_overall_assessment(self.results)
        self.status = AssessmentStatus.COMPLETED
        logger.info(
            "Assessment completed: %s (referral=%s, urgency=%s)",
            self._overall.overall_classification,
            self._overall.requires_referral,
            self._overall.referral_urgency.value,
        )
        return self._overall

    # ------------------------------------------------------------------
    # Record building
    # ------------------------------------------------------------------

    def to_record(self) -> Dict[str, Any]:
        """Flat assessment record keyed by record-store column names."""
        record: Dict[str, Any] = {"status": self.status.value}
        for key in ("case_id", "patient_id", "clinician_id"):
            value = getattr(self, key)
            if value is not None:
                record[key] = value

        for step, (completed_key, prefix, renames, skipped) in _RECORD_LAYOUT.items():
            observation_type = _CLASSIFIERS[step][0]
            observation = self._observations.get(step, observation_type())
            record[completed_key] = step in self._results
            for name, value in observation_to_dict(observation).items():
                if name in skipped:
                    continue
                record[renames.get(name, name)] = value
            if prefix is not None:
                result = self._results.get(step)
                record[f"{prefix}_classification"] = result.classification if result else None
                record[f"{prefix}_classification_color"] = result.color.value if result else None

        immunization = self._immunization or ImmunizationStatus()
        record["immunization_completed"] = self._immunization is not None
        record.update(observation_to_dict(immunization))

        hiv = self._hiv or HivStatus()
        # The HIV step is optional and always counts as done
        record["hiv_completed"] = True
        record.update(observation_to_dict(hiv))

        if self.status == AssessmentStatus.COMPLETED:
            overall = self.overall()
            record["overall_classification"] = overall.overall_classification
            record["overall_classification_color"] = overall.overall_color.value
            record["requires_referral"] = overall.requires_referral
            record["referral_urgency"] = (
                None if overall.referral_urgency == ReferralUrgency.NONE
                else overall.referral_urgency.value
            )
            record["treatment_recommendations"] = self.treatment_recommendations()

        return record
