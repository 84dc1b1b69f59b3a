"""
Column-level validation and normalization of legacy small-file values.

Every accepted vocabulary is listed explicitly; anything outside of it is
rejected with a typed error naming the offending column.
"""

import logging
import typing
from datetime import datetime

from .errors import FatalInputError, RecoverableValidationError
from .frequency import FrequencyModifier, is_numeric_frequency
from .model import DiseaseDatabase, EvidenceCode, Sex
from .ontology import OntologyView
from .qc import QcCode, QcIssueTracker

LOGGER = logging.getLogger(__name__)

HPO_PREFIX = "HP:"
HPO_ID_LENGTH = 10  # "HP:" + 7 digits

CANONICAL_DATE_FORMAT = "%Y-%m-%d"

# Date layouts found in the legacy files, tried in order
LEGACY_DATE_FORMATS = (
    CANONICAL_DATE_FORMAT,
    "%Y.%m.%d",
    "%Y/%m/%d",
    "%d.%m.%Y",
    "%m/%d/%Y",
    "%b %d, %Y",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
)

SEX_CODES = {"male": Sex.MALE, "female": Sex.FEMALE}
NEGATION_CODE = "not"


class FieldNormalizer:
    def __init__(self, ontology: OntologyView):
        self._ontology = ontology

    # Disease

    @staticmethod
    def normalize_disease(disease_id: str, disease_name: str) -> typing.Tuple[DiseaseDatabase, str, str]:
        disease_id = disease_id.strip()
        database = DiseaseDatabase.from_disease_id(disease_id)
        if database is None:
            raise FatalInputError(f"Did not recognize disease database for {disease_id!r}",
                                  column="disease_id", value=disease_id)
        if not disease_name.strip():
            raise FatalInputError(f"Empty disease name for {disease_id}", column="disease_name", value=disease_name)
        return database, disease_id, disease_name

    # HPO terms

    def validate_term_id(self, term_id: str, column: str) -> str:
        """Check prefix, length, and ontology membership of an HPO id."""
        term_id = term_id.strip()
        if not term_id.startswith(HPO_PREFIX):
            raise FatalInputError(f"Invalid HPO prefix for term id {term_id!r}", column=column, value=term_id)
        if len(term_id) != HPO_ID_LENGTH:
            raise FatalInputError(f"Bad length for HPO id {term_id!r}", column=column, value=term_id)
        if not self._ontology.exists(term_id):
            raise FatalInputError(f"Term {term_id} was not found in the HPO", column=column, value=term_id)
        return term_id

    def normalize_phenotype_id(self, term_id: str, tracker: QcIssueTracker) -> str:
        term_id = self.validate_term_id(term_id, "phenotype_id")
        primary_id = self._ontology.resolve_primary_id(term_id)
        if primary_id != term_id:
            LOGGER.debug(f"Replacing alternate id {term_id} with primary id {primary_id}")
            tracker.add(QcCode.UPDATING_ALT_ID)
        return primary_id

    def normalize_phenotype_label(self, primary_id: str, label: str, tracker: QcIssueTracker) -> str:
        current = self._ontology.label(primary_id)
        if label != current:
            LOGGER.debug(f"Updating label of {primary_id}: {label!r} -> {current!r}")
            tracker.add(QcCode.UPDATING_HPO_LABEL)
        return current

    def normalize_age_of_onset(self, term_id: str,
                               label: str) -> typing.Tuple[typing.Optional[str], typing.Optional[str]]:
        if not term_id.strip():
            return None, label.strip() or None
        return self.validate_term_id(term_id, "age_of_onset_id"), label.strip() or None

    # Evidence

    @staticmethod
    def choose_evidence(evidence_id: str, evidence_name: str, evidence: str) -> typing.Optional[EvidenceCode]:
        """
        The first well-formed code wins, in the order evidence id, evidence name, plain evidence.
        A missing code is flagged during QC reconciliation, not here.
        """
        for candidate in (evidence_id, evidence_name, evidence):
            code = EvidenceCode.parse(candidate)
            if code is not None:
                return code
        return None

    # Frequency

    @staticmethod
    def normalize_frequency(frequency: str) -> typing.Tuple[typing.Optional[FrequencyModifier], typing.Optional[str]]:
        """
        Return `(term, None)` for a known frequency word, `(None, ratio)` for a numeric
        frequency, and `(None, None)` for an empty cell.
        """
        frequency = frequency.strip()
        if not frequency:
            return None, None
        if is_numeric_frequency(frequency):
            return None, frequency
        try:
            return FrequencyModifier.from_label(frequency), None
        except ValueError as e:
            raise FatalInputError(str(e), column="frequency", value=frequency) from e

    # Sex & negation

    @staticmethod
    def normalize_sex(sex_id: str, sex_name: str, sex: str) -> typing.Optional[Sex]:
        chosen = None
        for column, value in (("sex_id", sex_id), ("sex_name", sex_name), ("sex", sex)):
            value = value.strip()
            if not value:
                continue
            code = SEX_CODES.get(value.lower())
            if code is None:
                raise RecoverableValidationError(f"Did not recognize sex code {value!r}", column=column, value=value)
            if chosen is None:
                chosen = code
        return chosen

    @staticmethod
    def normalize_negation(negation_id: str, negation_name: str) -> bool:
        negated = False
        for column, value in (("negation_id", negation_id), ("negation_name", negation_name)):
            value = value.strip()
            if not value:
                continue
            if value.lower() != NEGATION_CODE:
                raise RecoverableValidationError(f"Malformed negation {value!r}", column=column, value=value)
            negated = True
        return negated

    # Date

    @staticmethod
    def normalize_date(date_created: str, tracker: QcIssueTracker) -> typing.Optional[str]:
        raw = date_created.strip()
        if not raw:
            return None
        for fmt in LEGACY_DATE_FORMATS:
            try:
                parsed = datetime.strptime(raw, fmt)
            except ValueError:
                continue
            canonical = parsed.strftime(CANONICAL_DATE_FORMAT)
            if canonical != date_created:
                tracker.add(QcCode.UPDATED_DATE_FORMAT)
            return canonical
        raise FatalInputError(f"Could not parse date {raw!r}", column="date_created", value=raw)

    # Fields dropped from the v2 format

    @staticmethod
    def note_gene_fields(values: typing.Iterable[str], tracker: QcIssueTracker) -> None:
        if any(value.strip() for value in values):
            tracker.add(QcCode.GOT_GENE_DATA)

    @staticmethod
    def note_eq_fields(values: typing.Iterable[str], tracker: QcIssueTracker) -> None:
        if any(value.strip() for value in values):
            tracker.add(QcCode.GOT_EQ_ITEM)
