"""
Quality-control codes raised while converting a legacy row.

The code names are consumed by downstream curation tooling and must not change.
"""

import logging
import typing
from enum import Enum

if typing.TYPE_CHECKING:
    from .model import RecordBuilder
    from .ontology import OntologyView

LOGGER = logging.getLogger(__name__)


class QcCode(Enum):
    UPDATING_ALT_ID = "UPDATING_ALT_ID"
    UPDATED_DATE_FORMAT = "UPDATED_DATE_FORMAT"
    GOT_GENE_DATA = "GOT_GENE_DATA"
    GOT_EQ_ITEM = "GOT_EQ_ITEM"
    CREATED_MODIFIER = "CREATED_MODIFIER"
    DID_NOT_FIND_EVIDENCE_CODE = "DID_NOT_FIND_EVIDENCE_CODE"
    UPDATING_HPO_LABEL = "UPDATING_HPO_LABEL"


# Reformatting the date is cosmetic and does not require curator attention.
COSMETIC_CODES = frozenset({QcCode.UPDATED_DATE_FORMAT})


def has_qc_issues(codes: typing.Iterable[QcCode]) -> bool:
    return any(code not in COSMETIC_CODES for code in codes)


class QcIssueTracker:
    """
    Collects the QC codes of a single record.

    `finalize` must be called exactly once, after all columns have been ingested.
    """

    def __init__(self):
        self._codes: set[QcCode] = set()
        self._finalized = False

    def add(self, code: QcCode) -> None:
        if code not in self._codes:
            LOGGER.debug(f"QC code {code.name}")
        self._codes.add(code)

    def __contains__(self, code: QcCode) -> bool:
        return code in self._codes

    @property
    def codes(self) -> frozenset[QcCode]:
        return frozenset(self._codes)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def has_issues(self) -> bool:
        return has_qc_issues(self._codes)

    def finalize(self, builder: "RecordBuilder", ontology: "OntologyView") -> frozenset[QcCode]:
        """
        End-of-record reconciliation: flag a missing evidence code and make sure the
        phenotype label is the current ontology label.
        """
        if self._finalized:
            raise RuntimeError("QC reconciliation already ran for this record")
        self._finalized = True

        if builder.evidence is None:
            self.add(QcCode.DID_NOT_FIND_EVIDENCE_CODE)

        current_label = ontology.label(builder.phenotype_id)
        if builder.phenotype_label != current_label:
            self.add(QcCode.UPDATING_HPO_LABEL)
            builder.phenotype_label = current_label

        return self.codes
