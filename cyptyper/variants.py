"""Allele definitions and the de-duplicated, position-ordered variant set used for typing."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)

VariantKey = tuple[int, str, str]


class VariantKind(Enum):
    """Shape of a variant, derived from its REF and ALT lengths."""

    SNV = "snv"
    INSERTION = "insertion"
    DELETION = "deletion"
    INDEL = "indel"

    @classmethod
    def classify(cls, reference: str, alternate: str) -> VariantKind:
        """Pick the kind for a REF/ALT pair."""
        if len(reference) == 1:
            return cls.SNV if len(alternate) == 1 else cls.INSERTION
        if len(alternate) == 1:
            return cls.DELETION
        return cls.INDEL


@dataclass(frozen=True)
class Variant:
    """A single variant at a 0-based position with its REF (allele 0) and ALT (allele 1)."""

    position: int
    reference: str
    alternate: str
    kind: VariantKind

    @classmethod
    def from_alleles(cls, position: int, reference: str, alternate: str) -> Variant:
        """Build a variant, classifying it from the allele lengths."""
        return cls(position, reference, alternate, VariantKind.classify(reference, alternate))

    @property
    def key(self) -> VariantKey:
        """The (position, REF, ALT) lookup key."""
        return (self.position, self.reference, self.alternate)

    @property
    def reference_length(self) -> int:
        """Number of reference bases the variant spans."""
        return len(self.reference)


@dataclass(frozen=True)
class VariantDefinition:
    """A variant as written in an allele definition, with any extra annotations."""

    position: int
    reference: str
    alternate: str
    extras: Mapping[str, str] = field(default_factory=dict)

    @property
    def key(self) -> VariantKey:
        """The (position, REF, ALT) lookup key."""
        return (self.position, self.reference, self.alternate)

    @property
    def is_vi(self) -> bool:
        """True if the definition carries the VI flag."""
        return "VI" in self.extras


@dataclass(frozen=True)
class AlleleDefinition:
    """A star-allele definition: the gene, the allele label and its variants."""

    gene_name: str
    star_allele: str
    variants: tuple[VariantDefinition, ...] = ()


def iter_allele_definitions(
    allele_definitions: Mapping[str, AlleleDefinition] | Iterable[AlleleDefinition],
) -> Iterable[AlleleDefinition]:
    """Yield the definitions, accepting either a mapping by allele ID or a plain iterable."""
    if isinstance(allele_definitions, Mapping):
        return allele_definitions.values()
    return allele_definitions


@dataclass
class LoadedVariants:
    """Variants ordered by position, with a (position, REF, ALT) index and VI flags."""

    ordered_variants: list[Variant]
    variant_lookup: dict[VariantKey, int]
    vi_flags: list[bool]

    def __post_init__(self) -> None:
        if len(self.ordered_variants) != len(self.vi_flags):
            raise ValueError("ordered_variants and is_vi must be same length")
        if len(self.ordered_variants) != len(self.variant_lookup):
            raise ValueError("ordered_variants and variant_lookup must be same length")

    def __len__(self) -> int:
        return len(self.ordered_variants)

    def index_variant(self, position: int, reference: str, alternate: str) -> int:
        """Index of the given variant; raises KeyError if it is not loaded."""
        try:
            return self.variant_lookup[(position, reference, alternate)]
        except KeyError:
            raise KeyError(f"({position}, {reference}, {alternate}) not found") from None

    def first_variant_pos(self) -> int:
        """Position of the first variant."""
        if not self.ordered_variants:
            raise IndexError("no variants loaded")
        return self.ordered_variants[0].position

    def last_variant_pos(self) -> int:
        """Position of the last variant."""
        if not self.ordered_variants:
            raise IndexError("no variants loaded")
        return self.ordered_variants[-1].position

    def is_vi(self, index: int) -> bool:
        """True if the variant at `index` is flagged VI."""
        return self.vi_flags[index]

    def num_vi(self) -> int:
        """Total number of VI variants."""
        return sum(self.vi_flags)


def load_variant_database(
    allele_definitions: Mapping[str, AlleleDefinition] | Iterable[AlleleDefinition],
) -> LoadedVariants:
    """Collect the unique variants of all allele definitions, ordered by position."""
    seen: set[VariantKey] = set()
    vi_keys: set[VariantKey] = set()
    variants: list[Variant] = []

    for allele_def in iter_allele_definitions(allele_definitions):
        for variant_def in allele_def.variants:
            key = variant_def.key
            if variant_def.is_vi:
                vi_keys.add(key)
            if key not in seen:
                seen.add(key)
                variants.append(Variant.from_alleles(*key))

    if not variants:
        raise ValueError("no variants found in allele definitions")

    variants.sort(key=lambda v: v.position)
    logger.debug(
        "Found %d unique variants for GraphWFA from chr22:%d-%d",
        len(variants),
        variants[0].position + 1,
        variants[-1].position + 1,
    )

    lookup = {variant.key: index for index, variant in enumerate(variants)}
    vi_flags = [variant.key in vi_keys for variant in variants]
    return LoadedVariants(variants, lookup, vi_flags)