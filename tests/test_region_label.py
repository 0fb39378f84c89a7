import pytest

from cyptyper.region_label import RegionLabel, RegionType

T = RegionType


def label(rtype, sub=None):
    return RegionLabel(rtype, sub)


def test_region_type_display_strings():
    assert RegionLabel(T.UNKNOWN, None).full_allele() == "UNKNOWN"
    assert RegionLabel(T.LINK_REGION, None).full_allele() == "link_region"
    assert RegionLabel(T.CYP2D6_DELETION, None).full_allele() == "CYP2D6*5"
    assert str(RegionLabel(T.REP6, None)) == "REP6"


def test_region_type_ordering_follows_declaration():
    members = list(T)
    shuffled = [RegionLabel(t, None) for t in reversed(members)]
    assert sorted(shuffled) == [RegionLabel(t, None) for t in members]
    assert RegionLabel(T.UNKNOWN, None) < RegionLabel(T.REP6, None)
    assert RegionLabel(T.CYP2D6, None) < RegionLabel(T.FALSE_ALLELE, None)


@pytest.mark.parametrize("rtype", list(T))
def test_region_type_predicates(rtype):
    expected_cyp = rtype in {T.CYP2D6, T.CYP2D7, T.CYP2D6_DELETION, T.HYBRID}
    expected_reported = rtype in {T.CYP2D6, T.CYP2D6_DELETION, T.HYBRID}
    assert RegionType.is_cyp2d(rtype) == expected_cyp
    assert RegionType.is_rep(rtype) == (rtype in {T.REP6, T.REP7})
    assert RegionType.is_reported_allele(rtype) == expected_reported
    assert RegionLabel(rtype, None).is_cyp2d() == expected_cyp
    assert RegionLabel(rtype, None).is_reported_allele() == expected_reported


def test_full_allele_for_cyp2d6_with_subtype():
    sub = "4.001"
    assert label(T.CYP2D6, sub).full_allele() == str(T.CYP2D6) + "*" + sub
    assert label(T.CYP2D6).full_allele() == "CYP2D6"


def test_full_allele_for_hybrid_and_false_allele():
    hybrid = "CYP2D6::CYP2D7::exon9"
    assert label(T.HYBRID, hybrid).full_allele() == hybrid
    assert label(T.HYBRID).full_allele() == str(T.HYBRID)
    assert label(T.FALSE_ALLELE, "x").full_allele() == str(T.FALSE_ALLELE) + "_x"
    assert label(T.FALSE_ALLELE).full_allele() == str(T.FALSE_ALLELE)


@pytest.mark.parametrize("rtype", [T.UNKNOWN, T.REP6, T.LINK_REGION, T.REP7, T.SPACER, T.CYP2D7, T.CYP2D6_DELETION])
def test_full_allele_ignores_subtype_for_plain_types(rtype):
    assert label(rtype, "anything").full_allele() == str(rtype)
    assert str(label(rtype, "anything")) == str(rtype)


def test_simplify_allele_detailed_and_not():
    lab = label(T.CYP2D6, "4.001")
    assert lab.simplify_allele(True, {}) == "*4.001"
    assert lab.simplify_allele(False, {}) == "*4"


def test_simplify_allele_translation_wins():
    hybrid = "CYP2D6::CYP2D7::exon9"
    lab = label(T.HYBRID, hybrid)
    assert lab.simplify_allele(False, {hybrid: "36"}) == "*36"
    assert lab.simplify_allele(True, {hybrid: "36"}) == "*36"


def test_simplify_allele_unparseable_keeps_label():
    hybrid = "CYP2D6::CYP2D7::exon9"
    assert label(T.HYBRID, hybrid).simplify_allele(False, {}) == "*" + hybrid


def test_simplify_allele_special_cases():
    assert label(T.CYP2D6_DELETION).simplify_allele(False, {}) == "*5"
    assert label(T.CYP2D6).simplify_allele(False, {}) == "CYP2D6"
    assert label(T.CYP2D7).simplify_allele(True, {}) == "CYP2D7"


def test_allowed_label():
    assert not RegionLabel.unknown().is_allowed_label()
    assert not label(T.FALSE_ALLELE).is_allowed_label()
    assert label(T.REP6).is_allowed_label()
    assert RegionLabel.unknown() == label(T.UNKNOWN, None)


def test_standard_chain_is_allowed():
    chain = [T.REP6, T.CYP2D6, T.LINK_REGION, T.REP7, T.SPACER, T.CYP2D7]
    for first, second in zip(chain, chain[1:]):
        assert label(first).is_allowed_label_pair(label(second)), (first, second)


def test_deletion_chain_is_allowed():
    assert label(T.CYP2D6_DELETION).is_allowed_label_pair(label(T.SPACER))


@pytest.mark.parametrize(
    "first, second",
    [
        (T.CYP2D6_DELETION, T.CYP2D6_DELETION),
        (T.CYP2D7, T.LINK_REGION),
        (T.CYP2D6, T.REP6),
        (T.CYP2D6, T.REP7),
        (T.LINK_REGION, T.CYP2D6),
        (T.SPACER, T.REP7),
        (T.REP6, T.CYP2D7),
        (T.REP7, T.LINK_REGION),
    ],
)
def test_disallowed_pairs(first, second):
    assert not label(first).is_allowed_label_pair(label(second))


def test_candidate_chain_head():
    assert label(T.REP6).is_candidate_chain_head(False)
    assert label(T.CYP2D6_DELETION).is_candidate_chain_head(False)
    assert label(T.CYP2D6).is_candidate_chain_head(False)
    assert not label(T.HYBRID).is_candidate_chain_head(False)
    assert label(T.HYBRID).is_candidate_chain_head(True)
    assert not label(T.CYP2D7).is_candidate_chain_head(True)
    assert not label(T.REP7).is_candidate_chain_head(True)


@pytest.mark.parametrize("rtype", list(T))
def test_normalizing_allele(rtype):
    lab = label(rtype)
    assert lab.is_normalizing_allele(True) == rtype.is_cyp2d()
    assert lab.is_normalizing_allele(False) == (rtype is T.CYP2D6)
    assert lab.is_cyp2d() == rtype.is_cyp2d()
    assert lab.is_reported_allele() == rtype.is_reported_allele()


def test_label_ordering():
    labels = [
        label(T.HYBRID, "b"),
        label(T.CYP2D6, "2"),
        label(T.CYP2D6),
        label(T.CYP2D6, "1"),
        label(T.UNKNOWN),
    ]
    ordered = sorted(labels)
    assert ordered == [
        label(T.UNKNOWN),
        label(T.CYP2D6),
        label(T.CYP2D6, "1"),
        label(T.CYP2D6, "2"),
        label(T.HYBRID, "b"),
    ]


def test_labels_are_hashable():
    a = label(T.CYP2D6, "1")
    b = label(T.CYP2D6, "1")
    assert {a, b} == {a}