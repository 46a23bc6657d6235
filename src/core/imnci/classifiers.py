"""
IMNCI domain classifiers.

One pure function per assessment domain, each mapping an observation record to
a ClassificationResult. Rules are checked in priority order and the first
match wins. Optional measurements that are missing never trigger a severe
branch on their own.
"""

from typing import Optional

from .models import (
    ClassificationColor,
    ClassificationResult,
    CoughBreathingObservation,
    DangerSignsObservation,
    DiarrheaObservation,
    EarObservation,
    FeverObservation,
    MalariaTestResult,
    NutritionObservation,
    ReferralUrgency,
)

# Fast breathing thresholds (breaths/min) by age band
FAST_BREATHING_UNDER_2MO = 60
FAST_BREATHING_UNDER_12MO = 50
FAST_BREATHING_12MO_PLUS = 40

PERSISTENT_DIARRHEA_DAYS = 14
PROLONGED_FEVER_DAYS = 7
CHRONIC_EAR_DISCHARGE_DAYS = 14

# Nutrition cut-offs
MUAC_SEVERE_CM = 11.5
MUAC_MODERATE_CM = 12.5
WFA_SEVERE_Z = -3.0
WFA_MODERATE_Z = -2.0

_GREEN = ClassificationColor.GREEN
_YELLOW = ClassificationColor.YELLOW
_RED = ClassificationColor.RED


def has_danger_sign(obs: DangerSignsObservation) -> bool:
    """True if any general danger sign is present."""
    return (
        obs.not_able_to_drink
        or obs.vomits_everything
        or obs.has_convulsions
        or obs.lethargic_unconscious
        or obs.convulsing_now
    )


def fast_breathing_threshold(age_in_months: int) -> int:
    if age_in_months < 2:
        return FAST_BREATHING_UNDER_2MO
    if age_in_months < 12:
        return FAST_BREATHING_UNDER_12MO
    return FAST_BREATHING_12MO_PLUS


def _days(value: Optional[int]) -> int:
    return value if value is not None else 0


# ------------------------------------------------------------------
# General danger signs
# ------------------------------------------------------------------

def assess_danger_signs(obs: DangerSignsObservation) -> ClassificationResult:
    if has_danger_sign(obs):
        return ClassificationResult(
            classification="General Danger Signs Present",
            color=_RED,
            requires_referral=True,
            urgency=ReferralUrgency.EMERGENCY,
            treatment=(
                "Give first dose of appropriate antibiotic. "
                "Refer URGENTLY to hospital."
            ),
        )

    return ClassificationResult(
        classification="No General Danger Signs",
        color=_GREEN,
        requires_referral=False,
    )


# ------------------------------------------------------------------
# Cough or difficult breathing
# ------------------------------------------------------------------

def assess_cough_breathing(obs: CoughBreathingObservation) -> ClassificationResult:
    if not obs.has_cough_difficulty_breathing:
        return ClassificationResult(
            classification="No Cough or Breathing Problem",
            color=_GREEN,
            requires_referral=False,
        )

    rate = obs.breaths_per_minute if obs.breaths_per_minute is not None else 0
    fast_breathing = rate >= fast_breathing_threshold(obs.age_in_months)

    if obs.has_danger_signs or obs.stridor or obs.chest_indrawing:
        return ClassificationResult(
            classification="Severe Pneumonia or Very Severe Disease",
            color=_RED,
            requires_referral=True,
            urgency=ReferralUrgency.EMERGENCY,
            treatment=(
                "Give first dose of antibiotic. Give first dose of paracetamol "
                "for high fever. Refer URGENTLY to hospital."
            ),
        )

    if fast_breathing:
        return ClassificationResult(
            classification="Pneumonia",
            color=_YELLOW,
            requires_referral=False,
            treatment=(
                "Give oral antibiotic for 5 days. Soothe the throat with safe "
                "remedy. If wheezing, give bronchodilator for 5 days. "
                "Follow up in 2 days."
            ),
        )

    # Long-standing cough is advice only, not a referral flag.
    return ClassificationResult(
        classification="No Pneumonia: Cough or Cold",
        color=_GREEN,
        requires_referral=False,
        treatment=(
            "If coughing more than 14 days, refer for assessment. Soothe the "
            "throat with safe remedy. Follow up in 5 days if not improving."
        ),
    )


# ------------------------------------------------------------------
# Diarrhea
# ------------------------------------------------------------------

def assess_diarrhea(obs: DiarrheaObservation) -> ClassificationResult:
    if not obs.has_diarrhea:
        return ClassificationResult(
            classification="No Diarrhea",
            color=_GREEN,
            requires_referral=False,
        )

    if (obs.lethargic_unconscious or obs.not_able_to_drink) or (
        obs.sunken_eyes and obs.skin_pinch_very_slow
    ):
        return ClassificationResult(
            classification="Severe Dehydration",
            color=_RED,
            requires_referral=True,
            urgency=ReferralUrgency.EMERGENCY,
            treatment=(
                "If child has no other severe classification: Give fluid for "
                "severe dehydration (Plan C). If child also has another severe "
                "classification: Refer URGENTLY with mother giving frequent sips "
                "of ORS. Advise to continue breastfeeding."
            ),
        )

    if (
        obs.restless_irritable
        or obs.sunken_eyes
        or obs.drinks_eagerly
        or obs.skin_pinch_slow
    ):
        return ClassificationResult(
            classification="Some Dehydration",
            color=_YELLOW,
            requires_referral=False,
            treatment=(
                "Give fluid and food for some dehydration (Plan B). If child "
                "also has a severe classification, refer URGENTLY with mother "
                "giving frequent sips of ORS on the way. Advise to continue "
                "breastfeeding."
            ),
        )

    if obs.blood_in_stool:
        return ClassificationResult(
            classification="Dysentery",
            color=_YELLOW,
            requires_referral=False,
            treatment="Give ciprofloxacin for 3 days. Follow up in 2 days.",
        )

    if _days(obs.diarrhea_duration_days) >= PERSISTENT_DIARRHEA_DAYS:
        return ClassificationResult(
            classification="Persistent Diarrhea",
            color=_YELLOW,
            requires_referral=True,
            urgency=ReferralUrgency.ROUTINE,
            treatment="Refer for assessment and treatment.",
        )

    return ClassificationResult(
        classification="No Dehydration",
        color=_GREEN,
        requires_referral=False,
        treatment=(
            "Give fluid and food to treat diarrhea at home (Plan A). Give zinc "
            "supplements for 10-14 days. Advise mother when to return "
            "immediately. Follow up in 5 days if not improving."
        ),
    )


# ------------------------------------------------------------------
# Fever
# ------------------------------------------------------------------

def assess_fever(obs: FeverObservation) -> ClassificationResult:
    if not obs.has_fever:
        return ClassificationResult(
            classification="No Fever",
            color=_GREEN,
            requires_referral=False,
        )

    if obs.has_danger_signs or obs.stiff_neck:
        return ClassificationResult(
            classification="Very Severe Febrile Disease",
            color=_RED,
            requires_referral=True,
            urgency=ReferralUrgency.EMERGENCY,
            treatment=(
                "Give first dose of artesunate or quinine for severe malaria. "
                "Give first dose of antibiotic for severe bacterial infection. "
                "Treat to prevent low blood sugar. Give first dose of "
                "paracetamol. Refer URGENTLY."
            ),
        )

    # Measles pattern
    if obs.generalized_rash and obs.runny_nose:
        if obs.clouding_cornea or obs.mouth_ulcers or obs.pus_draining_eye:
            return ClassificationResult(
                classification="Severe Complicated Measles",
                color=_RED,
                requires_referral=True,
                urgency=ReferralUrgency.EMERGENCY,
                treatment=(
                    "Give vitamin A. Give first dose of antibiotic. If clouding "
                    "of cornea, apply tetracycline eye ointment. Refer URGENTLY."
                ),
            )
        return ClassificationResult(
            classification="Measles with Eye or Mouth Complications",
            color=_YELLOW,
            requires_referral=False,
            treatment=(
                "Give vitamin A. If pus draining from eye, apply tetracycline "
                "eye ointment. If mouth ulcers, apply gentian violet."
            ),
        )

    if obs.malaria_rdt_result == MalariaTestResult.POSITIVE:
        return ClassificationResult(
            classification="Malaria",
            color=_YELLOW,
            requires_referral=False,
            treatment=(
                "Give oral antimalarial (ACT) for 3 days. Give paracetamol for "
                "fever. Follow up in 2 days if fever persists."
            ),
        )

    if obs.malaria_rdt_result == MalariaTestResult.NEGATIVE:
        label = "Fever - No Malaria"
    else:
        label = "Fever - Cause Unknown"
    refer = _days(obs.fever_duration_days) >= PROLONGED_FEVER_DAYS

    return ClassificationResult(
        classification=label,
        color=_GREEN,
        requires_referral=refer,
        urgency=ReferralUrgency.ROUTINE if refer else None,
        treatment=(
            "Give paracetamol for fever. Follow up in 2 days if fever persists. "
            "If fever for 7 days or more, refer for assessment."
        ),
    )


# ------------------------------------------------------------------
# Ear problem
# ------------------------------------------------------------------

def assess_ear_problem(obs: EarObservation) -> ClassificationResult:
    if not obs.has_ear_problem:
        return ClassificationResult(
            classification="No Ear Problem",
            color=_GREEN,
            requires_referral=False,
        )

    if obs.tender_swelling_behind_ear:
        return ClassificationResult(
            classification="Mastoiditis",
            color=_RED,
            requires_referral=True,
            urgency=ReferralUrgency.URGENT,
            treatment=(
                "Give first dose of antibiotic. Give first dose of paracetamol "
                "for pain. Refer URGENTLY."
            ),
        )

    if _days(obs.ear_discharge_duration_days) >= CHRONIC_EAR_DISCHARGE_DAYS:
        return ClassificationResult(
            classification="Chronic Ear Infection",
            color=_YELLOW,
            requires_referral=True,
            urgency=ReferralUrgency.ROUTINE,
            treatment="Dry the ear by wicking. Refer for specialist assessment.",
        )

    if obs.ear_discharge or obs.ear_pain:
        return ClassificationResult(
            classification="Acute Ear Infection",
            color=_YELLOW,
            requires_referral=False,
            treatment=(
                "Give antibiotic for 5 days. Give paracetamol for pain. Dry the "
                "ear by wicking. Follow up in 5 days."
            ),
        )

    return ClassificationResult(
        classification="No Ear Infection",
        color=_GREEN,
        requires_referral=False,
    )


# ------------------------------------------------------------------
# Malnutrition and anemia
# ------------------------------------------------------------------

def assess_nutrition(obs: NutritionObservation) -> ClassificationResult:
    # Zero is an unfilled form field, not a measurement
    muac = obs.muac_measurement or None
    wfa = obs.weight_for_age or None

    if (
        obs.visible_severe_wasting
        or obs.edema_both_feet
        or (muac is not None and muac < MUAC_SEVERE_CM)
        or (wfa is not None and wfa < WFA_SEVERE_Z)
    ):
        return ClassificationResult(
            classification="Severe Acute Malnutrition",
            color=_RED,
            requires_referral=True,
            urgency=ReferralUrgency.URGENT,
            treatment=(
                "Give vitamin A. Treat the child to prevent low blood sugar. "
                "Keep child warm. Refer URGENTLY."
            ),
        )

    if obs.severe_palmar_pallor:
        return ClassificationResult(
            classification="Severe Anemia",
            color=_RED,
            requires_referral=True,
            urgency=ReferralUrgency.URGENT,
            treatment="Refer URGENTLY.",
        )

    if (muac is not None and MUAC_SEVERE_CM <= muac < MUAC_MODERATE_CM) or (
        wfa is not None and WFA_SEVERE_Z <= wfa < WFA_MODERATE_Z
    ):
        return ClassificationResult(
            classification="Moderate Acute Malnutrition",
            color=_YELLOW,
            requires_referral=False,
            treatment=(
                "Assess feeding and give counseling. Give supplementary feeding. "
                "Give vitamin A every 6 months. Follow up in 14 days."
            ),
        )

    if obs.palmar_pallor:
        return ClassificationResult(
            classification="Anemia",
            color=_YELLOW,
            requires_referral=False,
            treatment=(
                "Give iron and folic acid. Give mebendazole if child is 1 year "
                "or older. Follow up in 14 days."
            ),
        )

    return ClassificationResult(
        classification="No Malnutrition or Anemia",
        color=_GREEN,
        requires_referral=False,
        treatment="Counsel on feeding. Give vitamin A every 6 months.",
    )
