"""
Read-only ontology access used by the conversion.

The engine only needs four queries, captured by the `OntologyView` protocol.
`HpoOntologyView` answers them from an `hpotk.MinimalOntology` that was loaded
elsewhere, e.g. with `hpotk.load_minimal_ontology("hp.json")`.
"""

from __future__ import annotations

import typing

import hpotk


class OntologyView(typing.Protocol):

    def resolve_primary_id(self, term_id: str) -> str:
        """Map a primary or alternate id to the current primary id."""
        ...

    def label(self, term_id: str) -> str:
        ...

    def exists(self, term_id: str) -> bool:
        ...

    def descendants(self, root_id: str) -> typing.Set[str]:
        """All ids below `root_id` along inverse is-a edges, `root_id` included."""
        ...


class HpoOntologyView:
    def __init__(self, hpo: hpotk.MinimalOntology):
        self._hpo = hpo

    @property
    def version(self) -> typing.Optional[str]:
        return self._hpo.version

    def _get_term(self, term_id: str) -> typing.Optional[hpotk.MinimalTerm]:
        try:
            tid = hpotk.TermId.from_curie(term_id)
        except ValueError:
            return None
        return self._hpo.get_term(tid)

    def _require_term(self, term_id: str) -> hpotk.MinimalTerm:
        term = self._get_term(term_id)
        if term is None:
            raise KeyError(f"{term_id} is not in HPO {self.version}")
        return term

    def resolve_primary_id(self, term_id: str) -> str:
        return self._require_term(term_id).identifier.value

    def label(self, term_id: str) -> str:
        return self._require_term(term_id).name

    def exists(self, term_id: str) -> bool:
        return self._get_term(term_id) is not None

    def descendants(self, root_id: str) -> typing.Set[str]:
        root = hpotk.TermId.from_curie(self.resolve_primary_id(root_id))
        found = {tid.value for tid in self._hpo.graph.get_descendants(root)}
        found.add(root.value)
        return found
