"""
Mining of the free-text Description column.

Legacy descriptions are `;`-separated clauses. Some of them came out of a text-mining
pipeline and carry information that has its own column in the v2 format:

    MODIFIER:episodic                  -> modifier HP:0025303, clause dropped
    Mild                               -> modifier HP:0012825, clause dropped (CREATED_MODIFIER)
    OMIM-CS:RADIOLOGY > OSTEOSCLEROSIS -> evidence TAS if none was given, clause kept
    SHORT STATURE (RARE)               -> frequency VERY_RARE if none was given, clause kept
    DEAFNESS (IN SOME PATIENTS)        -> frequency OCCASIONAL if none was given, clause kept

Everything else is put back into the description.
"""

import logging

from .errors import FatalInputError
from .frequency import FrequencyModifier
from .model import EvidenceCode, RecordBuilder
from .modifier import ModifierIndex
from .qc import QcCode, QcIssueTracker

LOGGER = logging.getLogger(__name__)

CLAUSE_SEPARATOR = ";"
OMIM_CLINICAL_SYNOPSIS = "OMIM-CS"
MODIFIER_PREFIX = "MODIFIER:"
RARE_MARKER = "(RARE)"
SOME_PATIENTS_MARKER = "(IN SOME PATIENTS)"


def split_clauses(description: str) -> list[str]:
    """Split on `;` and drop trailing empty clauses, so "A;B;" yields ["A", "B"]."""
    clauses = description.split(CLAUSE_SEPARATOR)
    if len(clauses) == 1:
        return clauses
    while clauses and not clauses[-1]:
        clauses.pop()
    return clauses


class DescriptionTextMiner:
    def __init__(self, modifiers: ModifierIndex):
        self._modifiers = modifiers

    def mine(self, description: str, builder: RecordBuilder, tracker: QcIssueTracker) -> str:
        """
        Apply the clause rules to `description`, updating `builder` and `tracker`.
        Returns the residual description: the retained clauses, in their original order.
        """
        retained = [clause for clause in split_clauses(description)
                    if self._keep_clause(clause, description, builder, tracker)]
        return CLAUSE_SEPARATOR.join(retained)

    def _keep_clause(self, clause: str, description: str, builder: RecordBuilder, tracker: QcIssueTracker) -> bool:
        text = clause.strip()

        if OMIM_CLINICAL_SYNOPSIS in text:
            if builder.evidence is None:
                builder.evidence = EvidenceCode.TAS
            return True

        if text.startswith(MODIFIER_PREFIX):
            candidate = text[len(MODIFIER_PREFIX):].strip().lower()
            if "recurrent" in candidate:
                LOGGER.warning(f"Skipping recurrent modifier {candidate!r}; recurrence is not modelled")
                return False
            term_id = self._modifiers.lookup(candidate)
            if term_id is None:
                raise FatalInputError(
                    f"Could not identify modifier {candidate!r} in description {description!r}",
                    column="description", value=clause,
                )
            builder.modifiers.add(term_id)
            return False

        if RARE_MARKER in text:
            if not builder.has_frequency:
                builder.set_frequency_term(FrequencyModifier.VERY_RARE)
            return True

        if SOME_PATIENTS_MARKER in text:
            if not builder.has_frequency:
                builder.set_frequency_term(FrequencyModifier.OCCASIONAL)
            return True

        term_id = self._modifiers.lookup(text) if text else None
        if term_id is not None:
            tracker.add(QcCode.CREATED_MODIFIER)
            builder.modifiers.add(term_id)
            return False

        return True
