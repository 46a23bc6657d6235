"""
Overall IMNCI disposition.

Folds the per-domain ClassificationResults into one OverallAssessment:
the most severe color wins, any referral makes the child a referral case,
and the referral urgency is the highest urgency seen.
"""

import logging
from typing import Iterable, List, Optional

from .models import (
    COLOR_ORDER,
    URGENCY_ORDER,
    ClassificationColor,
    ClassificationResult,
    OverallAssessment,
    ReferralUrgency,
)

logger = logging.getLogger(__name__)

REFER_URGENTLY = "REFER URGENTLY - Severe Classification"
REFER = "REFER - Treatment Required at Higher Facility"
TREAT_AT_PHU = "Treatment at PHU - Follow up required"
TREAT_AT_HOME = "Child can be treated at home"


def calculate_overall_assessment(
    classifications: Iterable[Optional[ClassificationResult]],
) -> OverallAssessment:
    """
    Combine domain results into the overall disposition.

    Accepts a partial set mid-assessment; None entries (steps not yet
    classified) are skipped. Every result is visited exactly once.
    """
    highest_color = ClassificationColor.GREEN
    highest_urgency = ReferralUrgency.NONE
    requires_referral = False
    critical_findings: List[str] = []

    for result in classifications:
        if result is None:
            continue

        if result.requires_referral:
            requires_referral = True
            critical_findings.append(result.classification)

        if COLOR_ORDER[result.color] > COLOR_ORDER[highest_color]:
            highest_color = result.color

        if result.urgency is not None and (
            URGENCY_ORDER[result.urgency] > URGENCY_ORDER[highest_urgency]
        ):
            highest_urgency = result.urgency

    tier = COLOR_ORDER[highest_color]
    if tier >= COLOR_ORDER[ClassificationColor.RED]:
        label = REFER_URGENTLY
    elif tier >= COLOR_ORDER[ClassificationColor.YELLOW] and requires_referral:
        label = REFER
    elif tier >= COLOR_ORDER[ClassificationColor.YELLOW]:
        label = TREAT_AT_PHU
    else:
        label = TREAT_AT_HOME

    overall = OverallAssessment(
        overall_classification=label,
        overall_color=highest_color,
        requires_referral=requires_referral,
        referral_urgency=highest_urgency if requires_referral else ReferralUrgency.NONE,
        critical_findings=critical_findings,
    )
    logger.debug(
        "Overall assessment: %s (color=%s, urgency=%s, findings=%d)",
        overall.overall_classification,
        overall.overall_color.value,
        overall.referral_urgency.value,
        len(critical_findings),
    )
    return overall
