"""Collapsing overlapping allele hits within a searched sequence into one best call per region."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from cyptyper.region_label import RegionLabel, RegionType

logger = logging.getLogger(__name__)

# Overlap fraction above which two hits are treated as the same region.
OVERLAP_THRESHOLD = 0.9

# Types whose comparisons always use the penalized (unmapped-inclusive) score:
# *5 must anchor both ends, and REP6/REP7 are so similar they clip misleadingly.
PENALIZED_TYPES = frozenset({RegionType.CYP2D6_DELETION, RegionType.REP6, RegionType.REP7})

# Unmapped bases are not penalized while comparing hits during the search.
PENALIZE_DURING_SEARCH = False


@dataclass(frozen=True)
class CandidateRegion:
    """A hit of an allele within a searched sequence, before overlaps are collapsed.

    `score` is the edit fraction ignoring unmapped bases; `penalized_score`
    counts unmapped bases against the hit.
    """

    label: RegionLabel
    region: range
    score: float
    penalized_score: float

    def scored(self, penalized: bool) -> float:
        """The penalized or unpenalized score."""
        return self.penalized_score if penalized else self.score

    @property
    def uses_penalized_scoring(self) -> bool:
        """True if this hit's type always compares on the penalized score."""
        return self.label.region_type in PENALIZED_TYPES


@dataclass(frozen=True)
class AlleleMapping:
    """An allele label, the range of the searched sequence it covers, and its scores."""

    label: RegionLabel
    region: range
    score: float
    penalized_score: float

    def scored(self, penalized: bool) -> float:
        """The penalized or unpenalized score."""
        return self.penalized_score if penalized else self.score


def overlap_score(r1: range, r2: range) -> float:
    """Shared length over the shorter range's length; 0.0 when the ranges do not overlap."""
    min_end = min(r1.stop, r2.stop)
    max_start = max(r1.start, r2.start)
    if max_start >= min_end:
        return 0.0
    return (min_end - max_start) / min(len(r1), len(r2))


def allele_priority(label: RegionLabel) -> int:
    """Priority of a label when hits overlap heavily; higher wins."""
    return 1 if label.region_type is RegionType.CYP2D6_DELETION else 0


def search_order(labels: Iterable[RegionLabel]) -> list[RegionLabel]:
    """The order in which allele targets are searched: by full allele name."""
    return sorted(labels, key=lambda label: label.full_allele())


def _replaces(new: CandidateRegion, current: CandidateRegion) -> bool:
    penalized = (
        new.uses_penalized_scoring or current.uses_penalized_scoring or PENALIZE_DURING_SEARCH
    )
    new_priority = allele_priority(new.label)
    current_priority = allele_priority(current.label)
    better_score = new.scored(penalized) < current.scored(penalized)
    return (better_score and new_priority >= current_priority) or new_priority > current_priority


def collapse_regions(
    candidates: Iterable[CandidateRegion], max_penalized_frac: float
) -> list[AlleleMapping]:
    """Collapse overlapping hits into the best one per region and drop those missing too much.

    Hits are ordered by (start, end); ties keep their input order.
    """
    ordered = sorted(candidates, key=lambda c: (c.region.start, c.region.stop))

    collapsed: list[CandidateRegion] = []
    current: CandidateRegion | None = None
    for candidate in ordered:
        if current is None:
            current = candidate
        elif overlap_score(candidate.region, current.region) > OVERLAP_THRESHOLD:
            if _replaces(candidate, current):
                current = candidate
        else:
            collapsed.append(current)
            current = candidate
    if current is not None:
        collapsed.append(current)

    result: list[AlleleMapping] = []
    for region in collapsed:
        if region.penalized_score > max_penalized_frac:
            logger.debug(
                "Ignoring %s at %r, too short: %.4f",
                region.label,
                region.region,
                region.penalized_score,
            )
            continue
        logger.debug("%s at %r", region.label, region.region)
        result.append(
            AlleleMapping(region.label, region.region, region.score, region.penalized_score)
        )
    return result