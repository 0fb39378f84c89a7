"""Assigning a full CYP2D6 star-allele from the variant alleles seen along a graph traversal."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from cyptyper.region_label import RegionLabel, RegionType
from cyptyper.variants import AlleleDefinition, LoadedVariants, iter_allele_definitions

logger = logging.getLogger(__name__)

# Per-variant states observed in a sequence.
REFERENCE = 0
ALTERNATE = 1
AMBIGUOUS = 2
UNSET = 3

EXPECTED_GENE = "CYP2D6"


def build_haplotype_lookup(
    allele_definitions: Mapping[str, AlleleDefinition] | Iterable[AlleleDefinition],
    loaded_variants: LoadedVariants,
) -> dict[RegionLabel, list[int]]:
    """Map each CYP2D6 star-allele to its 0/1 vector over the loaded variants, ordered by label.

    Raises ValueError for a definition of another gene and KeyError for a variant
    that is not among the loaded ones.
    """
    lookup: dict[RegionLabel, list[int]] = {}
    for allele_def in iter_allele_definitions(allele_definitions):
        if allele_def.gene_name != EXPECTED_GENE:
            raise ValueError(
                f"expected a {EXPECTED_GENE} allele definition, got {allele_def.gene_name!r}"
            )
        assignments = [REFERENCE] * len(loaded_variants)
        for variant_def in allele_def.variants:
            index = loaded_variants.index_variant(
                variant_def.position, variant_def.reference, variant_def.alternate
            )
            assignments[index] = ALTERNATE
        lookup[RegionLabel(RegionType.CYP2D6, allele_def.star_allele)] = assignments
    return dict(sorted(lookup.items()))


def alleles_from_traversal(
    traversed_nodes: Iterable[int],
    node_to_alleles: Mapping[int, Iterable[tuple[int, int]]],
    num_variants: int,
) -> list[int]:
    """Per-variant allele states from the nodes a read traversed.

    Each variant starts UNSET; the first assignment seen sets it, and a later,
    different assignment marks it AMBIGUOUS.
    """
    alleles = [UNSET] * num_variants
    for node in traversed_nodes:
        for var_index, assignment in node_to_alleles.get(node, ()):
            current = alleles[var_index]
            if current == UNSET:
                alleles[var_index] = assignment
            elif current != assignment:
                alleles[var_index] = AMBIGUOUS
    return alleles


def _is_match(seq_value: int, hap_value: int) -> bool:
    if hap_value not in (REFERENCE, ALTERNATE):
        raise ValueError(f"unexpected haplotype value {hap_value}")
    if seq_value in (REFERENCE, ALTERNATE):
        return seq_value == hap_value
    if seq_value == AMBIGUOUS:
        return True
    if seq_value == UNSET:
        return False
    raise ValueError(f"unexpected sequence value {seq_value}")


def best_haplotype(
    alleles: Sequence[int],
    haplotype_lookup: Mapping[RegionLabel, Sequence[int]],
    loaded_variants: LoadedVariants,
    force_assignment: bool,
) -> RegionLabel:
    """Pick the haplotype matching the most VI variants, then the most variants overall.

    Ties are ordered by full allele name; with `force_assignment` the first is
    chosen, otherwise the result is an unknown label.
    """
    unknown = RegionLabel.unknown()
    best_ids: set[RegionLabel] = {unknown}
    best_score = (0, 0)

    for allele_id, haplotype in sorted(haplotype_lookup.items()):
        if len(alleles) != len(haplotype):
            raise ValueError(
                f"allele vector length {len(alleles)} does not match "
                f"haplotype {allele_id} length {len(haplotype)}"
            )
        vi_match = 0
        all_match = 0
        for index, (seq_value, hap_value) in enumerate(zip(alleles, haplotype)):
            if _is_match(seq_value, hap_value):
                all_match += 1
                if loaded_variants.is_vi(index):
                    vi_match += 1

        score = (vi_match, all_match)
        if score > best_score:
            logger.debug("new best: %s = %r", allele_id, score)
            best_ids = {allele_id}
            best_score = score
        elif score == best_score:
            logger.debug("new equi: %s = %r", allele_id, score)
            best_ids.add(allele_id)

    if len(best_ids) == 1:
        best_id = next(iter(best_ids))
    else:
        candidates = sorted(best_ids, key=lambda label: (label.full_allele(), label))
        names = [str(label) for label in candidates]
        if force_assignment:
            logger.debug("Ambiguous result detected, selecting first candidate; candidates: %s", names)
            best_id = candidates[0]
        else:
            logger.debug("Ambiguous result detected, setting to unknown; candidates: %s", names)
            best_id = unknown

    num_vi = loaded_variants.num_vi()
    num_variants = len(alleles)
    logger.debug(
        "%s -> %r, (%.4f, %.4f)",
        best_id,
        best_score,
        best_score[0] / num_vi if num_vi else 0.0,
        best_score[1] / num_variants if num_variants else 0.0,
    )
    return best_id