"""Display metadata for classification colors."""

from dataclasses import dataclass
from typing import Dict, Union

from .models import ClassificationColor


@dataclass(frozen=True)
class ColorDisplay:
    bg_class: str
    text_class: str
    border_class: str
    label: str


COLOR_DISPLAY: Dict[ClassificationColor, ColorDisplay] = {
    ClassificationColor.RED: ColorDisplay(
        bg_class="bg-red-100 dark:bg-red-900/30",
        text_class="text-red-700 dark:text-red-400",
        border_class="border-red-300 dark:border-red-700",
        label="Urgent Referral",
    ),
    ClassificationColor.PINK: ColorDisplay(
        bg_class="bg-pink-100 dark:bg-pink-900/30",
        text_class="text-pink-700 dark:text-pink-400",
        border_class="border-pink-300 dark:border-pink-700",
        label="Referral Needed",
    ),
    ClassificationColor.YELLOW: ColorDisplay(
        bg_class="bg-yellow-100 dark:bg-yellow-900/30",
        text_class="text-yellow-700 dark:text-yellow-400",
        border_class="border-yellow-300 dark:border-yellow-700",
        label="Treatment Required",
    ),
    ClassificationColor.GREEN: ColorDisplay(
        bg_class="bg-green-100 dark:bg-green-900/30",
        text_class="text-green-700 dark:text-green-400",
        border_class="border-green-300 dark:border-green-700",
        label="Home Care",
    ),
}


def get_color_display(color: Union[ClassificationColor, str]) -> ColorDisplay:
    """Look up display metadata; unknown colors fall back to green."""
    try:
        color = ClassificationColor(color)
    except ValueError:
        return COLOR_DISPLAY[ClassificationColor.GREEN]
    return COLOR_DISPLAY[color]
