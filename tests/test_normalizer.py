"""
Tests for the column rules of FieldNormalizer.
"""

import pytest

from smallfile.errors import FatalInputError, RecoverableValidationError
from smallfile.frequency import FrequencyModifier
from smallfile.model import DiseaseDatabase, EvidenceCode, Sex
from smallfile.normalizer import FieldNormalizer
from smallfile.qc import QcCode, QcIssueTracker


@pytest.fixture
def normalizer(ontology) -> FieldNormalizer:
    return FieldNormalizer(ontology)


@pytest.fixture
def tracker() -> QcIssueTracker:
    return QcIssueTracker()


@pytest.mark.parametrize(
    "disease_id, expected",
    [
        ("OMIM:100100", DiseaseDatabase.OMIM),
        ("ORPHA:558", DiseaseDatabase.ORPHANET),
        ("DECIPHER:17", DiseaseDatabase.DECIPHER),
    ],
)
def test_disease_database_from_prefix(disease_id, expected):
    database, normalized_id, name = FieldNormalizer.normalize_disease(disease_id, "Some disease")
    assert database is expected
    assert normalized_id == disease_id
    assert name == "Some disease"


@pytest.mark.parametrize("disease_id", ["MIM:100100", "orpha:558", "", "MONDO:0007739"])
def test_unknown_disease_prefix_is_fatal(disease_id):
    with pytest.raises(FatalInputError) as e:
        FieldNormalizer.normalize_disease(disease_id, "Some disease")
    assert e.value.column == "disease_id"


def test_empty_disease_name_is_fatal():
    with pytest.raises(FatalInputError):
        FieldNormalizer.normalize_disease("OMIM:100100", "  ")


class TestPhenotype:

    def test_primary_id_passes_through(self, normalizer, tracker):
        assert normalizer.normalize_phenotype_id("HP:0001250", tracker) == "HP:0001250"
        assert tracker.codes == frozenset()

    def test_alt_id_is_replaced(self, normalizer, tracker):
        assert normalizer.normalize_phenotype_id("HP:0002279", tracker) == "HP:0001250"
        assert QcCode.UPDATING_ALT_ID in tracker

    @pytest.mark.parametrize("term_id", ["0001250", "HP:123", "HP:00012500", "MP:0001250", ""])
    def test_malformed_id_is_fatal(self, normalizer, tracker, term_id):
        with pytest.raises(FatalInputError) as e:
            normalizer.normalize_phenotype_id(term_id, tracker)
        assert e.value.column == "phenotype_id"

    def test_unknown_id_is_fatal(self, normalizer, tracker):
        with pytest.raises(FatalInputError):
            normalizer.normalize_phenotype_id("HP:9999999", tracker)

    def test_stale_label_is_replaced(self, normalizer, tracker):
        assert normalizer.normalize_phenotype_label("HP:0001250", "Seizures", tracker) == "Seizure"
        assert QcCode.UPDATING_HPO_LABEL in tracker

    def test_current_label_is_kept(self, normalizer, tracker):
        assert normalizer.normalize_phenotype_label("HP:0001250", "Seizure", tracker) == "Seizure"
        assert tracker.codes == frozenset()


class TestAgeOfOnset:

    def test_empty_onset_is_skipped(self, normalizer):
        assert normalizer.normalize_age_of_onset("", "") == (None, None)

    def test_valid_onset(self, normalizer):
        assert normalizer.normalize_age_of_onset("HP:0003577", "Congenital onset") == (
            "HP:0003577", "Congenital onset")

    @pytest.mark.parametrize("term_id", ["HP:3577", "Congenital", "HP:9999999"])
    def test_malformed_onset_is_fatal(self, normalizer, term_id):
        with pytest.raises(FatalInputError) as e:
            normalizer.normalize_age_of_onset(term_id, "")
        assert e.value.column == "age_of_onset_id"


@pytest.mark.parametrize(
    "evidence_id, evidence_name, evidence, expected",
    [
        ("IEA", "TAS", "PCS", EvidenceCode.IEA),
        ("bogus", "TAS", "", EvidenceCode.TAS),
        ("", "", "PCS", EvidenceCode.PCS),
        ("", "ICE", "", EvidenceCode.ICE),
        ("", "", "", None),
        ("iea", "Traceable", "?", None),
    ],
)
def test_evidence_precedence(evidence_id, evidence_name, evidence, expected):
    assert FieldNormalizer.choose_evidence(evidence_id, evidence_name, evidence) == expected


class TestFrequency:

    @pytest.mark.parametrize(
        "frequency, expected",
        [
            ("Very frequent", FrequencyModifier.VERY_FREQUENT),
            ("rare", FrequencyModifier.VERY_RARE),
            ("obligate", FrequencyModifier.OBLIGATE),
            ("Variable", FrequencyModifier.FREQUENCY_ROOT),
        ],
    )
    def test_vocabulary(self, frequency, expected):
        assert FieldNormalizer.normalize_frequency(frequency) == (expected, None)

    def test_numeric_frequency_passes_through(self):
        assert FieldNormalizer.normalize_frequency("3/10") == (None, "3/10")

    @pytest.mark.parametrize("frequency", ["", "   "])
    def test_empty_frequency(self, frequency):
        assert FieldNormalizer.normalize_frequency(frequency) == (None, None)

    @pytest.mark.parametrize("frequency", ["sometimes", "HP:0040283", "very very rare"])
    def test_unmapped_frequency_is_fatal(self, frequency):
        with pytest.raises(FatalInputError) as e:
            FieldNormalizer.normalize_frequency(frequency)
        assert e.value.column == "frequency"


class TestSexAndNegation:

    def test_sex_precedence(self):
        assert FieldNormalizer.normalize_sex("male", "MALE", "") is Sex.MALE
        assert FieldNormalizer.normalize_sex("", "Female", "") is Sex.FEMALE
        assert FieldNormalizer.normalize_sex("", "", "FEMALE") is Sex.FEMALE
        assert FieldNormalizer.normalize_sex("", "", "") is None

    def test_unrecognized_sex_is_recoverable(self):
        with pytest.raises(RecoverableValidationError) as e:
            FieldNormalizer.normalize_sex("", "unknown", "")
        assert e.value.column == "sex_name"
        assert not e.value.fatal

    def test_negation(self):
        assert FieldNormalizer.normalize_negation("NOT", "")
        assert FieldNormalizer.normalize_negation("", "not")
        assert not FieldNormalizer.normalize_negation("", "")

    def test_unrecognized_negation_is_recoverable(self):
        with pytest.raises(RecoverableValidationError):
            FieldNormalizer.normalize_negation("NO", "")


class TestDate:

    def test_canonical_date_adds_no_code(self, tracker):
        assert FieldNormalizer.normalize_date("2018-01-23", tracker) == "2018-01-23"
        assert tracker.codes == frozenset()

    @pytest.mark.parametrize(
        "raw", ["2018.01.23", "2018/01/23", "23.01.2018", "01/23/2018", "Jan 23, 2018", "2018-01-23T10:11:12"]
    )
    def test_legacy_formats_are_reformatted(self, tracker, raw):
        assert FieldNormalizer.normalize_date(raw, tracker) == "2018-01-23"
        assert tracker.codes == {QcCode.UPDATED_DATE_FORMAT}

    def test_empty_date(self, tracker):
        assert FieldNormalizer.normalize_date("", tracker) is None
        assert tracker.codes == frozenset()

    def test_unparseable_date_is_fatal(self, tracker):
        with pytest.raises(FatalInputError):
            FieldNormalizer.normalize_date("last tuesday", tracker)


def test_gene_and_eq_fields(tracker):
    FieldNormalizer.note_gene_fields(["", " "], tracker)
    FieldNormalizer.note_eq_fields(["", ""], tracker)
    assert tracker.codes == frozenset()

    FieldNormalizer.note_gene_fields(["", "FBN1"], tracker)
    FieldNormalizer.note_eq_fields(["PATO:0000001"], tracker)
    assert tracker.codes == {QcCode.GOT_GENE_DATA, QcCode.GOT_EQ_ITEM}
