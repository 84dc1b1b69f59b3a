"""
Domain model of the small-file conversion.

- `LegacyRow`: the raw string columns of one line of an "old" small file.
- `RecordBuilder`: the mutable, in-progress conversion of a legacy row.
- `CanonicalRecord`: the immutable v2 record yielded by a finalized builder.
"""

import typing
from dataclasses import dataclass, field, fields
from enum import Enum

import pandas as pd

from .frequency import FrequencyModifier
from .qc import QcCode


class DiseaseDatabase(Enum):
    """Disease databases recognized by their identifier prefix."""
    OMIM = "OMIM"
    ORPHANET = "ORPHA"
    DECIPHER = "DECIPHER"

    @classmethod
    def from_disease_id(cls, disease_id: str) -> typing.Optional["DiseaseDatabase"]:
        for database in cls:
            if disease_id.startswith(database.value):
                return database
        return None


class EvidenceCode(Enum):
    IEA = "IEA"
    ICE = "ICE"
    TAS = "TAS"
    PCS = "PCS"

    @classmethod
    def parse(cls, code: str) -> typing.Optional["EvidenceCode"]:
        """Return the evidence code if `code` is well-formed, otherwise `None`."""
        try:
            return cls(code.strip())
        except ValueError:
            return None


class Sex(Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"


@dataclass
class LegacyRow:
    """
    One line of the legacy small-file format. Every column is a raw string;
    missing cells are empty strings.
    """

    disease_id: str = ""
    disease_name: str = ""
    gene_id: str = ""
    gene_name: str = ""
    genotype: str = ""
    gene_symbol: str = ""
    phenotype_id: str = ""
    phenotype_name: str = ""
    age_of_onset_id: str = ""
    age_of_onset_name: str = ""
    evidence_id: str = ""
    evidence_name: str = ""
    frequency: str = ""
    sex_id: str = ""
    sex_name: str = ""
    negation_id: str = ""
    negation_name: str = ""
    description: str = ""
    pub: str = ""
    assigned_by: str = ""
    date_created: str = ""
    evidence: str = ""
    entity_id: str = ""
    entity_name: str = ""
    quality_id: str = ""
    quality_name: str = ""
    addl_entity_id: str = ""
    addl_entity_name: str = ""
    abnormal_id: str = ""
    abnormal_name: str = ""
    orthologs: str = ""
    sex: str = ""

    @classmethod
    def from_mapping(cls, row: typing.Union[typing.Mapping[str, typing.Any], pd.Series]) -> "LegacyRow":
        """
        Build a row from a dict or a `pandas.Series` keyed by field name.
        `None` and NaN cells become empty strings; unknown keys are ignored.
        """
        values = {}
        for f in fields(cls):
            value = row.get(f.name)
            if value is None or (not isinstance(value, str) and pd.isna(value)):
                values[f.name] = ""
            else:
                values[f.name] = str(value)
        return cls(**values)


@dataclass(frozen=True)
class CanonicalRecord:
    """
    A v2 small-file annotation.

    Attributes:
        disease_id: CURIE of the disease (e.g. 'OMIM:266600').
        database: Disease database derived from the identifier prefix.
        phenotype_id: Primary HPO id of the annotated phenotype.
        phenotype_label: Current ontology label of `phenotype_id`.
        frequency_id: Categorical HPO frequency term, exclusive with `frequency_ratio`.
        frequency_ratio: Raw numeric frequency such as '3/10' awaiting separate parsing.
        modifiers: HPO ids of clinical modifier terms.
        qc_codes: Data-quality observations made during conversion.
    """

    disease_id: str
    disease_name: str
    database: DiseaseDatabase
    phenotype_id: str
    phenotype_label: str
    age_of_onset_id: typing.Optional[str] = None
    age_of_onset_label: typing.Optional[str] = None
    evidence: typing.Optional[EvidenceCode] = None
    frequency_id: typing.Optional[FrequencyModifier] = None
    frequency_ratio: typing.Optional[str] = None
    sex: typing.Optional[Sex] = None
    negated: bool = False
    modifiers: frozenset[str] = frozenset()
    description: str = ""
    publication: str = ""
    curator: str = ""
    date_created: typing.Optional[str] = None
    qc_codes: frozenset[QcCode] = frozenset()

    def __post_init__(self):
        if self.frequency_id is not None and self.frequency_ratio is not None:
            raise ValueError("frequency cannot be both categorical and a numeric ratio")

    @property
    def frequency(self) -> str:
        if self.frequency_id is not None:
            return self.frequency_id.term_id
        return self.frequency_ratio or ""

    @property
    def modifier_string(self) -> str:
        return ";".join(sorted(self.modifiers))


@dataclass
class RecordBuilder:
    """
    Collects the normalized values of a legacy row in column order.
    Only `build` hands out a `CanonicalRecord`.
    """

    disease_id: typing.Optional[str] = None
    disease_name: typing.Optional[str] = None
    database: typing.Optional[DiseaseDatabase] = None
    phenotype_id: typing.Optional[str] = None
    phenotype_label: typing.Optional[str] = None
    age_of_onset_id: typing.Optional[str] = None
    age_of_onset_label: typing.Optional[str] = None
    evidence: typing.Optional[EvidenceCode] = None
    frequency_id: typing.Optional[FrequencyModifier] = None
    frequency_ratio: typing.Optional[str] = None
    sex: typing.Optional[Sex] = None
    negated: bool = False
    modifiers: set[str] = field(default_factory=set)
    description: str = ""
    publication: str = ""
    curator: str = ""
    date_created: typing.Optional[str] = None

    @property
    def has_frequency(self) -> bool:
        return self.frequency_id is not None or self.frequency_ratio is not None

    def set_frequency_term(self, frequency: FrequencyModifier) -> None:
        self.frequency_id = frequency
        self.frequency_ratio = None

    def set_frequency_ratio(self, ratio: str) -> None:
        self.frequency_ratio = ratio
        self.frequency_id = None

    def build(self, qc_codes: typing.Iterable[QcCode]) -> CanonicalRecord:
        missing = [name for name in ("disease_id", "disease_name", "database", "phenotype_id", "phenotype_label")
                   if getattr(self, name) is None]
        if missing:
            raise ValueError(f"Cannot build a record without {', '.join(missing)}")
        return CanonicalRecord(
            disease_id=self.disease_id,
            disease_name=self.disease_name,
            database=self.database,
            phenotype_id=self.phenotype_id,
            phenotype_label=self.phenotype_label,
            age_of_onset_id=self.age_of_onset_id,
            age_of_onset_label=self.age_of_onset_label,
            evidence=self.evidence,
            frequency_id=self.frequency_id,
            frequency_ratio=self.frequency_ratio,
            sex=self.sex,
            negated=self.negated,
            modifiers=frozenset(self.modifiers),
            description=self.description,
            publication=self.publication,
            curator=self.curator,
            date_created=self.date_created,
            qc_codes=frozenset(qc_codes),
        )
