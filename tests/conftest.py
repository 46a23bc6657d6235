"""Test configuration and fixtures"""

import pytest

from src.core.imnci import (
    ClassificationColor,
    ClassificationResult,
    ReferralUrgency,
)


@pytest.fixture
def red_referral_result():
    """Severe result requiring emergency referral"""
    return ClassificationResult(
        classification="Severe Dehydration",
        color=ClassificationColor.RED,
        requires_referral=True,
        urgency=ReferralUrgency.EMERGENCY,
        treatment="Plan C.",
    )


@pytest.fixture
def yellow_referral_result():
    """Non-severe result with routine referral"""
    return ClassificationResult(
        classification="Chronic Ear Infection",
        color=ClassificationColor.YELLOW,
        requires_referral=True,
        urgency=ReferralUrgency.ROUTINE,
        treatment="Dry the ear by wicking.",
    )


@pytest.fixture
def yellow_result():
    return ClassificationResult(
        classification="Pneumonia",
        color=ClassificationColor.YELLOW,
        requires_referral=False,
        treatment="Give oral antibiotic for 5 days.",
    )


@pytest.fixture
def green_result():
    return ClassificationResult(
        classification="No Fever",
        color=ClassificationColor.GREEN,
        requires_referral=False,
    )
