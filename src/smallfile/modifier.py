"""
Lookup of HPO clinical modifier terms by label.

The index covers every term in the "Clinical modifier" subhierarchy
(HP:0012823, root included) and is built once per process. It is read-only
afterwards and may be shared by concurrent conversions.
"""

import logging
import typing
from types import MappingProxyType

from .ontology import OntologyView

LOGGER = logging.getLogger(__name__)

CLINICAL_MODIFIER_ROOT = "HP:0012823"


class ModifierIndex:
    """
    Case-insensitive, exact-match mapping of modifier labels to term ids.

    If two modifier terms share a lower-cased label, the term with the smallest id
    is kept; the other ids are listed in `collisions`.
    """

    def __init__(self, label_to_id: typing.Mapping[str, str],
                 collisions: typing.Optional[typing.Mapping[str, typing.Sequence[str]]] = None):
        self._label_to_id = MappingProxyType({label.lower(): tid for label, tid in label_to_id.items()})
        self._collisions = MappingProxyType({label: tuple(ids) for label, ids in (collisions or {}).items()})

    @classmethod
    def from_ontology(cls, ontology: OntologyView, root_id: str = CLINICAL_MODIFIER_ROOT) -> "ModifierIndex":
        label_to_id: dict[str, str] = {}
        collisions: dict[str, list[str]] = {}
        # sorted so that the tie-break does not depend on set iteration order
        for term_id in sorted(ontology.descendants(root_id)):
            label = ontology.label(term_id).lower()
            kept = label_to_id.setdefault(label, term_id)
            if kept != term_id:
                LOGGER.warning(f"Modifier label {label!r} is shared by {kept} and {term_id}; keeping {kept}")
                collisions.setdefault(label, [kept]).append(term_id)
        LOGGER.info(f"Indexed {len(label_to_id)} clinical modifier labels below {root_id}")
        return cls(label_to_id, collisions)

    def lookup(self, label: str) -> typing.Optional[str]:
        return self._label_to_id.get(label.lower())

    @property
    def collisions(self) -> typing.Mapping[str, typing.Tuple[str, ...]]:
        return self._collisions

    def __contains__(self, label: str) -> bool:
        return self.lookup(label) is not None

    def __len__(self) -> int:
        return len(self._label_to_id)
