import os
import typing

import hpotk
import pytest

from smallfile.assembler import ConversionContext, RecordAssembler
from smallfile.model import LegacyRow
from smallfile.modifier import ModifierIndex


class FakeOntology:
    """
    Dict-backed `OntologyView` with a handful of HPO terms.
    """

    def __init__(self, labels: dict[str, str], parents: dict[str, str], alt_ids: dict[str, str]):
        self._labels = labels
        self._parents = parents
        self._alt_ids = alt_ids

    def resolve_primary_id(self, term_id: str) -> str:
        primary = self._alt_ids.get(term_id, term_id)
        if primary not in self._labels:
            raise KeyError(term_id)
        return primary

    def label(self, term_id: str) -> str:
        return self._labels[self.resolve_primary_id(term_id)]

    def exists(self, term_id: str) -> bool:
        return term_id in self._labels or term_id in self._alt_ids

    def descendants(self, root_id: str) -> typing.Set[str]:
        found = {root_id}
        changed = True
        while changed:
            changed = False
            for child, parent in self._parents.items():
                if parent in found and child not in found:
                    found.add(child)
                    changed = True
        return found


LABELS = {
    "HP:0000001": "All",
    "HP:0000118": "Phenotypic abnormality",
    "HP:0001250": "Seizure",
    "HP:0004322": "Short stature",
    "HP:0000365": "Hearing impairment",
    "HP:0000004": "Onset and clinical course",
    "HP:0003577": "Congenital onset",
    "HP:0012823": "Clinical modifier",
    "HP:0012824": "Severity",
    "HP:0012825": "Mild",
    "HP:0012826": "Moderate",
    "HP:0011008": "Temporal pattern",
    "HP:0025303": "Episodic",
    "HP:0031796": "Recurrent",
}

PARENTS = {
    "HP:0000118": "HP:0000001",
    "HP:0001250": "HP:0000118",
    "HP:0004322": "HP:0000118",
    "HP:0000365": "HP:0000118",
    "HP:0000004": "HP:0000001",
    "HP:0003577": "HP:0000004",
    "HP:0012823": "HP:0000001",
    "HP:0012824": "HP:0012823",
    "HP:0012825": "HP:0012824",
    "HP:0012826": "HP:0012824",
    "HP:0011008": "HP:0012823",
    "HP:0025303": "HP:0011008",
    "HP:0031796": "HP:0011008",
}

# HP:0002279 is an alternate id of Seizure in this miniature ontology
ALT_IDS = {"HP:0002279": "HP:0001250"}


@pytest.fixture(scope="session")
def ontology() -> FakeOntology:
    return FakeOntology(LABELS, PARENTS, ALT_IDS)


@pytest.fixture(scope="session")
def modifier_index(ontology: FakeOntology) -> ModifierIndex:
    return ModifierIndex.from_ontology(ontology)


@pytest.fixture(scope="session")
def context(ontology: FakeOntology, modifier_index: ModifierIndex) -> ConversionContext:
    return ConversionContext(ontology=ontology, modifiers=modifier_index)


@pytest.fixture
def assembler(context: ConversionContext) -> RecordAssembler:
    return RecordAssembler(context)


@pytest.fixture
def make_row() -> typing.Callable[..., LegacyRow]:
    """
    Factory for a well-formed, already canonical legacy row; keyword arguments override columns.
    """

    def _make_row(**overrides) -> LegacyRow:
        values = dict(
            disease_id="OMIM:100100",
            disease_name="PRUNE BELLY SYNDROME",
            phenotype_id="HP:0001250",
            phenotype_name="Seizure",
            evidence_id="IEA",
            pub="OMIM:100100",
            assigned_by="HPO:skoehler",
            date_created="2018-01-23",
        )
        values.update(overrides)
        return LegacyRow(**values)

    return _make_row


@pytest.fixture(scope="session")
def fpath_test_dir() -> str:
    """
    Path to `tests/data/` folder.
    """
    return os.path.join(os.path.dirname(__file__), "data")


@pytest.fixture(scope="session")
def fpath_hpo(fpath_test_dir: str) -> str:
    return os.path.join(fpath_test_dir, "hp.mini.json")


@pytest.fixture(scope="session")
def hpo(fpath_hpo: str) -> hpotk.MinimalOntology:
    """
    A miniature HPO in obographs JSON, loaded with `hpotk`.
    """
    return hpotk.load_minimal_ontology(fpath_hpo)
