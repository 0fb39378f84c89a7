import pytest

from cyptyper.assignment import (
    AMBIGUOUS,
    UNSET,
    alleles_from_traversal,
    best_haplotype,
    build_haplotype_lookup,
)
from cyptyper.region_label import RegionLabel, RegionType
from cyptyper.variants import AlleleDefinition, VariantDefinition, load_variant_database

V10 = VariantDefinition(10, "A", "G", {"VI": "yes"})
V20 = VariantDefinition(20, "C", "T")
V30 = VariantDefinition(30, "G", "A", {"VI": "yes"})


@pytest.fixture
def definitions():
    return {
        "CYP2D6*1": AlleleDefinition("CYP2D6", "1"),
        "CYP2D6*2": AlleleDefinition("CYP2D6", "2", (V10, V20)),
        "CYP2D6*4": AlleleDefinition("CYP2D6", "4", (V30,)),
    }


@pytest.fixture
def loaded(definitions):
    return load_variant_database(definitions)


@pytest.fixture
def lookup(definitions, loaded):
    return build_haplotype_lookup(definitions, loaded)


def label(star):
    return RegionLabel(RegionType.CYP2D6, star)


def test_lookup_vectors(lookup):
    assert lookup == {
        label("1"): [0, 0, 0],
        label("2"): [1, 1, 0],
        label("4"): [0, 0, 1],
    }


def test_lookup_is_sorted_by_label(definitions, loaded):
    reversed_defs = list(definitions.values())[::-1]
    result = build_haplotype_lookup(reversed_defs, loaded)
    assert list(result) == sorted(result)


def test_lookup_rejects_other_gene(loaded):
    with pytest.raises(ValueError):
        build_haplotype_lookup([AlleleDefinition("CYP2D7", "1")], loaded)


def test_lookup_rejects_unknown_variant(loaded):
    missing = VariantDefinition(99, "T", "C")
    with pytest.raises(KeyError):
        build_haplotype_lookup([AlleleDefinition("CYP2D6", "9", (missing,))], loaded)


def test_traversal_unset_without_nodes():
    assert alleles_from_traversal([], {}, 3) == [UNSET] * 3


def test_traversal_sets_and_marks_conflicts():
    node_map = {0: [(0, 1)], 1: [(1, 0)], 2: [(0, 0)], 3: [(1, 0)]}
    result = alleles_from_traversal([0, 1, 2, 3, 7], node_map, 3)
    assert result == [AMBIGUOUS, 0, UNSET]


def test_best_exact_match(lookup, loaded):
    assert best_haplotype([1, 1, 0], lookup, loaded, False) == label("2")
    assert best_haplotype([0, 0, 1], lookup, loaded, False) == label("4")


def test_best_tie_forced_picks_first_name(lookup, loaded):
    alleles = [AMBIGUOUS] * 3
    assert best_haplotype(alleles, lookup, loaded, True) == label("1")


def test_best_tie_unforced_is_unknown(lookup, loaded):
    alleles = [AMBIGUOUS] * 3
    assert best_haplotype(alleles, lookup, loaded, False) == RegionLabel.unknown()


def test_best_all_unset_unforced_is_unknown(lookup, loaded):
    assert best_haplotype([UNSET] * 3, lookup, loaded, False) == RegionLabel.unknown()


def test_best_rejects_length_mismatch(lookup, loaded):
    with pytest.raises(ValueError):
        best_haplotype([0, 0], lookup, loaded, False)


def test_best_rejects_bad_sequence_value(lookup, loaded):
    with pytest.raises(ValueError):
        best_haplotype([0, 7, 0], lookup, loaded, False)


def test_round_trip_from_traversal(lookup, loaded):
    node_map = {5: [(0, 0), (1, 0)], 6: [(2, 1)]}
    alleles = alleles_from_traversal([5, 6], node_map, len(loaded))
    assert best_haplotype(alleles, lookup, loaded, False) == label("4")