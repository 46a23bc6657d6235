"""
Main application entry point
Demonstrates a step-by-step IMNCI assessment for one child
"""

from datetime import date

from src.core.config import config
from src.core.imnci import (
    AssessmentSession,
    AssessmentStep,
    CoughBreathingObservation,
    DangerSignsObservation,
    DiarrheaObservation,
    EarObservation,
    FeverObservation,
    ImmunizationStatus,
    MalariaTestResult,
    NutritionObservation,
    get_color_display,
)


def main():
    """Main application workflow"""

    print("="*60)
    print("PHU IMNCI Assessment")
    print("="*60)

    # Example: a 10-month-old with cough, fast breathing and malaria
    session = AssessmentSession.for_patient(
        date_of_birth=date(2025, 12, 1),
        today=date(2026, 10, 18),
        config=config.get_section('assessment'),
    )
    print(f"\nAge: {session.age_months} months")

    steps = [
        (AssessmentStep.DANGER, DangerSignsObservation()),
        (AssessmentStep.COUGH, CoughBreathingObservation(
            has_cough_difficulty_breathing=True,
            cough_duration_days=3,
            breaths_per_minute=55,
        )),
        (AssessmentStep.DIARRHEA, DiarrheaObservation(has_diarrhea=False)),
        (AssessmentStep.FEVER, FeverObservation(
            has_fever=True,
            fever_duration_days=2,
            temperature=38.6,
            malaria_rdt_result=MalariaTestResult.POSITIVE,
        )),
        (AssessmentStep.EAR, EarObservation(has_ear_problem=False)),
        (AssessmentStep.NUTRITION, NutritionObservation(muac_measurement=13.2)),
    ]

    for i, (step, observation) in enumerate(steps, start=1):
        result = session.classify(step, observation)
        print(f"[{i}/{len(steps)}] {step.value:10} {result.classification} "
              f"({get_color_display(result.color).label})")

    session.record_immunization(ImmunizationStatus(immunization_up_to_date=True))
    overall = session.complete()

    # Display results
    print("\n" + "="*60)
    print("OVERALL ASSESSMENT")
    print("="*60)
    print(f"\nClassification: {overall.overall_classification}")
    print(f"Color: {overall.overall_color.value}")
    print(f"Referral: {'yes' if overall.requires_referral else 'no'} "
          f"({overall.referral_urgency.value})")

    if overall.critical_findings:
        print(f"\nCritical Findings ({len(overall.critical_findings)}):")
        for finding in overall.critical_findings:
            print(f"   - {finding}")

    print("\nTreatment:")
    for treatment in session.treatment_recommendations().split("\n\n"):
        print(f"   - {treatment}")

    print("\n" + "="*60)


if __name__ == "__main__":
    main()
