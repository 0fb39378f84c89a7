"""Region types and labels for the CYP2D6 locus, plus the rules for chaining them."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering

_I64_MAX = 2**63 - 1
_I64_MIN = -(2**63)

# Decimal forms accepted when reducing a sub-allele such as "4.001" to "4".
_FLOAT_RE = re.compile(
    r"""[+-]?(
        (\d+\.?\d*([eE][+-]?\d+)?)
        |(\.\d+([eE][+-]?\d+)?)
        |inf|infinity|nan
    )""",
    re.VERBOSE | re.IGNORECASE,
)


@total_ordering
class RegionType(Enum):
    """Core region types associated with the CYP2D6 locus, ordered as declared."""

    UNKNOWN = "UNKNOWN"
    REP6 = "REP6"
    CYP2D6 = "CYP2D6"
    LINK_REGION = "link_region"
    REP7 = "REP7"
    SPACER = "spacer"
    CYP2D7 = "CYP2D7"
    CYP2D6_DELETION = "CYP2D6*5"
    HYBRID = "Hybrid"
    FALSE_ALLELE = "FalseAllele"

    def __str__(self) -> str:
        return self.value

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RegionType):
            return NotImplemented
        return self.rank < other.rank

    def is_cyp2d(self) -> bool:
        """True for D6, D7, the *5 deletion and hybrids."""
        return self in _CYP2D_TYPES

    def is_rep(self) -> bool:
        """True for the REP6 and REP7 regions."""
        return self in (RegionType.REP6, RegionType.REP7)

    def is_reported_allele(self) -> bool:
        """True if this type would appear in a final diplotype."""
        return self in (RegionType.CYP2D6, RegionType.CYP2D6_DELETION, RegionType.HYBRID)


_RANKS = {member: index for index, member in enumerate(RegionType)}

_CYP2D_TYPES = frozenset(
    {
        RegionType.CYP2D6,
        RegionType.CYP2D7,
        RegionType.CYP2D6_DELETION,
        RegionType.HYBRID,
    }
)


def _parse_float(text: str) -> float | None:
    if not _FLOAT_RE.fullmatch(text):
        return None
    return float(text)


def _floor_to_int(value: float) -> int:
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return _I64_MAX if value > 0 else _I64_MIN
    return max(_I64_MIN, min(_I64_MAX, math.floor(value)))


@total_ordering
@dataclass(frozen=True)
class RegionLabel:
    """A region type plus an optional, more descriptive sub-label such as "4.001"."""

    region_type: RegionType
    subtype_label: str | None = None

    @classmethod
    def unknown(cls) -> RegionLabel:
        """A label of unknown type with no sub-label."""
        return cls(RegionType.UNKNOWN)

    def _sort_key(self) -> tuple[int, bool, str]:
        return (
            self.region_type.rank,
            self.subtype_label is not None,
            self.subtype_label or "",
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RegionLabel):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        return self.full_allele()

    def simplify_allele(self, detailed: bool, translations: Mapping[str, str]) -> str:
        """User-facing allele name, e.g. CYP2D6*4.001 becomes *4.001 or, if not detailed, *4."""
        rtype = self.region_type
        if rtype in (RegionType.CYP2D6, RegionType.HYBRID):
            label = self.subtype_label
            if label is None:
                return self.full_allele()
            translation = translations.get(label)
            if translation is not None:
                return f"*{translation}"
            if detailed:
                return f"*{label}"
            value = _parse_float(label)
            if value is None:
                return f"*{label}"
            return f"*{_floor_to_int(value)}"
        if rtype is RegionType.CYP2D6_DELETION:
            return "*5"
        return self.full_allele()

    def full_allele(self) -> str:
        """The full internal allele name."""
        rtype = self.region_type
        label = self.subtype_label
        if rtype is RegionType.CYP2D6:
            return f"{rtype}*{label}" if label is not None else str(rtype)
        if rtype is RegionType.HYBRID:
            return label if label is not None else str(rtype)
        if rtype is RegionType.FALSE_ALLELE:
            return f"{rtype}_{label}" if label is not None else str(rtype)
        return str(rtype)

    def is_allowed_label(self) -> bool:
        """True if this label may be part of a chain."""
        return self.region_type not in (RegionType.UNKNOWN, RegionType.FALSE_ALLELE)

    def is_allowed_label_pair(self, link_candidate: RegionLabel) -> bool:
        """True if `link_candidate` may directly follow this label in a chain."""
        t = RegionType
        type1 = self.region_type
        type2 = link_candidate.region_type
        double_star5 = type1 is t.CYP2D6_DELETION and type2 is t.CYP2D6_DELETION

        unexpected_order = (
            type2 is t.REP6
            or (type1.is_cyp2d() and type1 is not t.CYP2D6_DELETION and type2 is not t.LINK_REGION)
            or (type2 is t.LINK_REGION and not type1.is_cyp2d())
            or (type1 is t.LINK_REGION and not type2.is_rep())
            or (type2.is_rep() and type1 is not t.LINK_REGION)
            or (type1.is_rep() and not (type2 is t.SPACER or type2.is_cyp2d()))
            or (type2 is t.SPACER and not (type1.is_rep() or type1 is t.CYP2D6_DELETION))
            or (type1 is t.SPACER and not type2.is_cyp2d())
            or (type2 is t.CYP2D7 and type1 is not t.SPACER)
            or type1 is t.CYP2D7
        )
        return not double_star5 and not unexpected_order

    def is_candidate_chain_head(self, normalize_all_alleles: bool) -> bool:
        """True if this label may start a chain."""
        rtype = self.region_type
        if rtype in (RegionType.REP6, RegionType.CYP2D6_DELETION):
            return True
        if rtype in (RegionType.CYP2D6, RegionType.HYBRID):
            return self.is_normalizing_allele(normalize_all_alleles)
        return False

    def is_normalizing_allele(self, normalize_all_alleles: bool) -> bool:
        """True if this label's coverage is used for normalisation."""
        if normalize_all_alleles:
            return self.region_type.is_cyp2d()
        return self.region_type is RegionType.CYP2D6

    def is_reported_allele(self) -> bool:
        """True if this label would appear in a final diplotype."""
        return self.region_type.is_reported_allele()

    def is_cyp2d(self) -> bool:
        """True if this label is a D6, D7, *5 or hybrid allele."""
        return self.region_type.is_cyp2d()