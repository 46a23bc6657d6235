"""IMNCI (Integrated Management of Neonatal and Childhood Illness) decision support"""

from .aggregator import calculate_overall_assessment
from .assessment import (
    AssessmentError,
    AssessmentSession,
    AssessmentStatus,
    AssessmentStep,
    age_in_months,
)
from .classifiers import (
    assess_cough_breathing,
    assess_danger_signs,
    assess_diarrhea,
    assess_ear_problem,
    assess_fever,
    assess_nutrition,
)
from .display import COLOR_DISPLAY, ColorDisplay, get_color_display
from .models import (
    ClassificationColor,
    ClassificationResult,
    CoughBreathingObservation,
    DangerSignsObservation,
    DiarrheaObservation,
    EarObservation,
    FeverObservation,
    HivStatus,
    ImmunizationStatus,
    MalariaTestResult,
    NutritionObservation,
    OverallAssessment,
    ReferralUrgency,
)

__all__ = [
    "calculate_overall_assessment",
    "AssessmentError",
    "AssessmentSession",
    "AssessmentStatus",
    "AssessmentStep",
    "age_in_months",
    "assess_cough_breathing",
    "assess_danger_signs",
    "assess_diarrhea",
    "assess_ear_problem",
    "assess_fever",
    "assess_nutrition",
    "COLOR_DISPLAY",
    "ColorDisplay",
    "get_color_display",
    "ClassificationColor",
    "ClassificationResult",
    "CoughBreathingObservation",
    "DangerSignsObservation",
    "DiarrheaObservation",
    "EarObservation",
    "FeverObservation",
    "HivStatus",
    "ImmunizationStatus",
    "MalariaTestResult",
    "NutritionObservation",
    "OverallAssessment",
    "ReferralUrgency",
]
