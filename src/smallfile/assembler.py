"""
Conversion of one legacy row into a v2 `CanonicalRecord`.

The row is consumed column group by column group in a fixed order, because later
steps depend on state set by earlier ones (e.g. the description may only supply
an evidence code if none of the evidence columns did). A single QC
reconciliation pass then finalizes the builder into an immutable record.
"""

import logging
import typing
from dataclasses import dataclass

from .description import DescriptionTextMiner
from .errors import ConversionError
from .model import CanonicalRecord, LegacyRow, RecordBuilder
from .modifier import ModifierIndex
from .normalizer import FieldNormalizer
from .ontology import OntologyView
from .qc import QcCode, QcIssueTracker, has_qc_issues

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionContext:
    """
    Read-only dependencies of a conversion, built once and shared by all rows.
    """

    ontology: OntologyView
    modifiers: ModifierIndex

    @classmethod
    def from_ontology(cls, ontology: OntologyView) -> "ConversionContext":
        return cls(ontology=ontology, modifiers=ModifierIndex.from_ontology(ontology))


@dataclass(frozen=True)
class ConversionResult:
    """
    Outcome of converting one line: either a record or the error that prevented it.
    """

    line_number: int
    record: typing.Optional[CanonicalRecord] = None
    error: typing.Optional[ConversionError] = None

    @property
    def ok(self) -> bool:
        return self.record is not None

    @property
    def fatal(self) -> bool:
        return self.error is not None and self.error.fatal

    @property
    def qc_codes(self) -> frozenset[QcCode]:
        return self.record.qc_codes if self.record is not None else frozenset()

    def has_qc_issues(self) -> bool:
        return has_qc_issues(self.qc_codes)


Step = typing.Callable[[LegacyRow, RecordBuilder, QcIssueTracker], None]


class RecordAssembler:
    def __init__(self, context: ConversionContext):
        self._ontology = context.ontology
        self._normalizer = FieldNormalizer(context.ontology)
        self._miner = DescriptionTextMiner(context.modifiers)
        self._steps: typing.Tuple[Step, ...] = (
            self._ingest_disease,
            self._ingest_gene_fields,
            self._ingest_phenotype,
            self._ingest_age_of_onset,
            self._ingest_evidence,
            self._ingest_frequency,
            self._ingest_sex,
            self._ingest_negation,
            self._ingest_description,
            self._ingest_provenance,
            self._ingest_eq_fields,
        )

    def assemble(self, row: LegacyRow) -> typing.Tuple[CanonicalRecord, frozenset[QcCode]]:
        """
        Convert `row`, raising a `ConversionError` if it cannot be converted.
        """
        builder = RecordBuilder()
        tracker = QcIssueTracker()
        for step in self._steps:
            step(row, builder, tracker)
        qc_codes = tracker.finalize(builder, self._ontology)
        return builder.build(qc_codes), qc_codes

    def convert_row(self, row: LegacyRow, line_number: int) -> ConversionResult:
        try:
            record, _ = self.assemble(row)
        except ConversionError as e:
            LOGGER.debug(f"Line {line_number}: {e}")
            return ConversionResult(line_number=line_number, error=e)
        return ConversionResult(line_number=line_number, record=record)

    # Column groups, in ingestion order

    def _ingest_disease(self, row: LegacyRow, builder: RecordBuilder, tracker: QcIssueTracker) -> None:
        builder.database, builder.disease_id, builder.disease_name = self._normalizer.normalize_disease(
            row.disease_id, row.disease_name)

    def _ingest_gene_fields(self, row: LegacyRow, builder: RecordBuilder, tracker: QcIssueTracker) -> None:
        self._normalizer.note_gene_fields((row.gene_id, row.gene_name, row.genotype, row.gene_symbol), tracker)

    def _ingest_phenotype(self, row: LegacyRow, builder: RecordBuilder, tracker: QcIssueTracker) -> None:
        builder.phenotype_id = self._normalizer.normalize_phenotype_id(row.phenotype_id, tracker)
        builder.phenotype_label = self._normalizer.normalize_phenotype_label(
            builder.phenotype_id, row.phenotype_name, tracker)

    def _ingest_age_of_onset(self, row: LegacyRow, builder: RecordBuilder, tracker: QcIssueTracker) -> None:
        builder.age_of_onset_id, builder.age_of_onset_label = self._normalizer.normalize_age_of_onset(
            row.age_of_onset_id, row.age_of_onset_name)

    def _ingest_evidence(self, row: LegacyRow, builder: RecordBuilder, tracker: QcIssueTracker) -> None:
        builder.evidence = self._normalizer.choose_evidence(row.evidence_id, row.evidence_name, row.evidence)

    def _ingest_frequency(self, row: LegacyRow, builder: RecordBuilder, tracker: QcIssueTracker) -> None:
        term, ratio = self._normalizer.normalize_frequency(row.frequency)
        if term is not None:
            builder.set_frequency_term(term)
        elif ratio is not None:
            builder.set_frequency_ratio(ratio)

    def _ingest_sex(self, row: LegacyRow, builder: RecordBuilder, tracker: QcIssueTracker) -> None:
        builder.sex = self._normalizer.normalize_sex(row.sex_id, row.sex_name, row.sex)

    def _ingest_negation(self, row: LegacyRow, builder: RecordBuilder, tracker: QcIssueTracker) -> None:
        builder.negated = self._normalizer.normalize_negation(row.negation_id, row.negation_name)

    def _ingest_description(self, row: LegacyRow, builder: RecordBuilder, tracker: QcIssueTracker) -> None:
        builder.description = self._miner.mine(row.description, builder, tracker)

    def _ingest_provenance(self, row: LegacyRow, builder: RecordBuilder, tracker: QcIssueTracker) -> None:
        builder.publication = row.pub.strip()
        builder.curator = row.assigned_by.strip()
        builder.date_created = self._normalizer.normalize_date(row.date_created, tracker)

    def _ingest_eq_fields(self, row: LegacyRow, builder: RecordBuilder, tracker: QcIssueTracker) -> None:
        self._normalizer.note_eq_fields(
            (row.entity_id, row.entity_name, row.quality_id, row.quality_name, row.addl_entity_id,
             row.addl_entity_name, row.abnormal_id, row.abnormal_name, row.orthologs),
            tracker,
        )
