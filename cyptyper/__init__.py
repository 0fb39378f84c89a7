"""Region labelling, variant loading, region collapsing, haplotype assignment and chain graphs for the CYP2D6 locus."""

__version__ = "0.1.0"

__all__ = ["assignment", "region_label", "regions", "variants", "visualization"]