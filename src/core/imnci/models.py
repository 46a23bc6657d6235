"""Data models for IMNCI classification."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ClassificationColor(str, Enum):
    """Severity tier of a classification, least to most severe."""
    GREEN = "green"    # Home care
    YELLOW = "yellow"  # Treatment at the PHU
    PINK = "pink"      # Referral needed (no rule produces it yet)
    RED = "red"        # Urgent referral


class ReferralUrgency(str, Enum):
    NONE = "none"
    ROUTINE = "routine"
    URGENT = "urgent"
    EMERGENCY = "emergency"


class MalariaTestResult(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


COLOR_ORDER = {
    ClassificationColor.GREEN: 0,
    ClassificationColor.YELLOW: 1,
    ClassificationColor.PINK: 2,
    ClassificationColor.RED: 3,
}

URGENCY_ORDER = {
    ReferralUrgency.NONE: 0,
    ReferralUrgency.ROUTINE: 1,
    ReferralUrgency.URGENT: 2,
    ReferralUrgency.EMERGENCY: 3,
}


# ------------------------------------------------------------------
# Observations (one per clinical domain)
# ------------------------------------------------------------------

@dataclass(frozen=True)
class DangerSignsObservation:
    not_able_to_drink: bool = False
    vomits_everything: bool = False
    has_convulsions: bool = False
    lethargic_unconscious: bool = False
    convulsing_now: bool = False


@dataclass(frozen=True)
class CoughBreathingObservation:
    has_cough_difficulty_breathing: bool = False
    cough_duration_days: Optional[int] = None
    breaths_per_minute: Optional[int] = None
    age_in_months: int = 0
    chest_indrawing: bool = False
    stridor: bool = False
    has_danger_signs: bool = False
    wheezing: bool = False  # recorded only


@dataclass(frozen=True)
class DiarrheaObservation:
    has_diarrhea: bool = False
    diarrhea_duration_days: Optional[int] = None
    blood_in_stool: bool = False
    sunken_eyes: bool = False
    skin_pinch_slow: bool = False
    skin_pinch_very_slow: bool = False
    restless_irritable: bool = False
    drinks_eagerly: bool = False
    not_able_to_drink: bool = False
    lethargic_unconscious: bool = False


@dataclass(frozen=True)
class FeverObservation:
    has_fever: bool = False
    fever_duration_days: Optional[int] = None
    temperature: Optional[float] = None
    stiff_neck: bool = False
    malaria_rdt_result: Optional[MalariaTestResult] = None
    generalized_rash: bool = False
    runny_nose: bool = False
    mouth_ulcers: bool = False
    pus_draining_eye: bool = False
    clouding_cornea: bool = False
    has_danger_signs: bool = False


@dataclass(frozen=True)
class EarObservation:
    has_ear_problem: bool = False
    ear_pain: bool = False
    ear_discharge: bool = False
    ear_discharge_duration_days: Optional[int] = None
    tender_swelling_behind_ear: bool = False


@dataclass(frozen=True)
class NutritionObservation:
    visible_severe_wasting: bool = False
    edema_both_feet: bool = False
    weight_for_age: Optional[float] = None  # z-score
    muac_measurement: Optional[float] = None  # cm
    palmar_pallor: bool = False
    severe_palmar_pallor: bool = False


@dataclass(frozen=True)
class ImmunizationStatus:
    immunization_up_to_date: bool = False
    vitamin_a_given: bool = False
    deworming_given: bool = False


@dataclass(frozen=True)
class HivStatus:
    mother_hiv_positive: Optional[bool] = None
    child_hiv_tested: bool = False
    child_hiv_result: Optional[str] = None


# ------------------------------------------------------------------
# Results
# ------------------------------------------------------------------

@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of one domain classifier."""
    classification: str
    color: ClassificationColor
    requires_referral: bool
    urgency: Optional[ReferralUrgency] = None
    treatment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "classification": self.classification,
            "color": self.color.value,
            "requires_referral": self.requires_referral,
            "urgency": self.urgency.value if self.urgency else None,
            "treatment": self.treatment,
        }


@dataclass(frozen=True)
class OverallAssessment:
    """Patient disposition derived from all domain results."""
    overall_classification: str
    overall_color: ClassificationColor
    requires_referral: bool
    referral_urgency: ReferralUrgency
    critical_findings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_classification": self.overall_classification,
            "overall_color": self.overall_color.value,
            "requires_referral": self.requires_referral,
            "referral_urgency": self.referral_urgency.value,
            "critical_findings": list(self.critical_findings),
        }


def observation_to_dict(observation) -> Dict[str, Any]:
    """Flatten an observation dataclass, unwrapping enum values."""
    data = asdict(observation)
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in data.items()}
