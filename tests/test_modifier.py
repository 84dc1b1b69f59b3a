import pytest

from smallfile.modifier import CLINICAL_MODIFIER_ROOT, ModifierIndex


class TestModifierIndex:

    def test_covers_subtree_including_root(self, modifier_index: ModifierIndex):
        assert modifier_index.lookup("clinical modifier") == CLINICAL_MODIFIER_ROOT
        assert modifier_index.lookup("episodic") == "HP:0025303"
        assert modifier_index.lookup("mild") == "HP:0012825"

    def test_lookup_is_case_insensitive(self, modifier_index: ModifierIndex):
        assert modifier_index.lookup("EPISODIC") == "HP:0025303"
        assert "Mild" in modifier_index

    @pytest.mark.parametrize("label", ["seizure", "epis", "mildly", "severe"])
    def test_lookup_is_exact(self, modifier_index: ModifierIndex, label: str):
        """Terms outside the subtree and partial labels are not found."""
        assert modifier_index.lookup(label) is None

    def test_size(self, modifier_index: ModifierIndex):
        assert len(modifier_index) == 7

    def test_label_collision_keeps_smallest_id(self):
        class CollidingOntology:
            def descendants(self, root_id):
                return {"HP:0000003", "HP:0000002", "HP:0000001"}

            def label(self, term_id):
                return {"HP:0000001": "Modifier", "HP:0000002": "Mild", "HP:0000003": "MILD"}[term_id]

        index = ModifierIndex.from_ontology(CollidingOntology(), root_id="HP:0000001")

        assert index.lookup("mild") == "HP:0000002"
        assert index.collisions == {"mild": ("HP:0000002", "HP:0000003")}

    def test_index_is_read_only(self, modifier_index: ModifierIndex):
        with pytest.raises(TypeError):
            modifier_index._label_to_id["new"] = "HP:0000001"

    def test_collisions_default_to_empty(self):
        index = ModifierIndex({"Mild": "HP:0012825"})

        assert index.lookup("mild") == "HP:0012825"
        assert dict(index.collisions) == {}
