"""
Frequency domain model.

Maps the legacy free-text frequency column onto terms of the HPO "Frequency"
subhierarchy (HP:0040279 and its children HP:0040280–HP:0040285).
"""

from enum import Enum


class FrequencyModifier(Enum):
    """
    Enumeration of HPO frequency terms. The value is the term CURIE.
    """
    FREQUENCY_ROOT = "HP:0040279"
    OBLIGATE = "HP:0040280"
    VERY_FREQUENT = "HP:0040281"
    FREQUENT = "HP:0040282"
    OCCASIONAL = "HP:0040283"
    VERY_RARE = "HP:0040284"
    EXCLUDED = "HP:0040285"

    @property
    def term_id(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str) -> "FrequencyModifier":
        """
        Convert a legacy frequency word ("Very frequent", "hallmark", ...) into the enum.
        Matching is case-insensitive and ignores surrounding whitespace.
        """
        key = label.strip().lower()
        try:
            return LEGACY_FREQUENCY_VOCABULARY[key]
        except KeyError:
            raise ValueError(f"Unknown frequency label: {label!r}")


# The legacy files used a handful of words that do not line up exactly with the HPO
# frequency terms. "rare" has no HPO counterpart other than "Very rare", and
# "variable" can only be annotated to the root of the frequency subhierarchy.
LEGACY_FREQUENCY_VOCABULARY = {
    "very rare": FrequencyModifier.VERY_RARE,
    "rare": FrequencyModifier.VERY_RARE,
    "frequent": FrequencyModifier.FREQUENT,
    "occasional": FrequencyModifier.OCCASIONAL,
    "variable": FrequencyModifier.FREQUENCY_ROOT,
    "typical": FrequencyModifier.FREQUENT,
    "very frequent": FrequencyModifier.VERY_FREQUENT,
    "common": FrequencyModifier.FREQUENT,
    "hallmark": FrequencyModifier.VERY_FREQUENT,
    "obligate": FrequencyModifier.OBLIGATE,
}


def is_numeric_frequency(value: str) -> bool:
    """Ratios and percentages ("3/10", "25%") start with a digit and are parsed downstream."""
    return bool(value) and value[0].isdigit()
