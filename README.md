# cyptyper

Building blocks for typing the CYP2D6 locus from long, accurate reads.

The package takes the results of alignment and graph traversal and does the
bookkeeping around them. The modules are:

- `cyptyper.region_label`: `RegionType` and `RegionLabel` describe the pieces
  of the locus. These are REP6, CYP2D6, the link region, REP7, the spacer,
  CYP2D7, the `*5` deletion and hybrids. A label gives its names
  (`full_allele`, `simplify_allele`). It also gives the rules for which labels
  may follow one another in a chain (`is_allowed_label_pair`) and which may
  start one (`is_candidate_chain_head`). Further methods say whether a label
  is used for coverage normalisation or reported in a diplotype.
- `cyptyper.variants`: `load_variant_database` turns star-allele definitions
  (`AlleleDefinition`, `VariantDefinition`) into `LoadedVariants`. This is a
  position-ordered set of unique `Variant`s with a `(position, REF, ALT)`
  index (`index_variant`) and a record of which variants carry the VI flag
  (`is_vi`, `num_vi`). Each variant is classified by `VariantKind` as an SNV,
  an insertion, a deletion or an indel.
- `cyptyper.regions`: these functions merge candidate hits (`CandidateRegion`)
  into the best `AlleleMapping` for each stretch of a searched sequence.
  - `overlap_score` gives the shared length over the shorter range's length.
  - `allele_priority` ranks `*5` above every other label.
  - `search_order` sorts labels by full allele name.
  - `collapse_regions` keeps the best hit among those that overlap by more
    than 0.9. It then drops any hit whose penalized score exceeds the
    given limit.
- `cyptyper.assignment`: these functions assign a star allele from an
  observed allele vector.
  - `build_haplotype_lookup` maps each CYP2D6 star allele to its 0/1 vector
    over the loaded variants.
  - `alleles_from_traversal` derives the per-variant states (reference,
    alternate, ambiguous, unset) from traversed graph nodes.
  - `best_haplotype` scores the vector against every haplotype. VI matches
    count first and total matches break ties. A tie is resolved by full
    allele name when `force_assignment` is set. Without it, a tie gives an
    unknown label.
- `cyptyper.visualization`: these functions draw observed chains of labels as
  an SVG graph.
  - `count_chain_usage` totals the frequency of each label and each adjacent
    label pair.
  - `edge_style` gives an edge width from 2 to 5 and a colour from blue to
    red.
  - `generate_debug_graph` writes the SVG file. Each node shows its index,
    its allele name and its count.

## What it does not do

The package does not read reads, alignments, reference genomes or
allele-definition database files. It does not build sequences or search
them. It does not align sequences or run graph alignment. It does not build
chains or call diplotypes. Callers supply those results: mapping scores for
`collapse_regions`, and traversed nodes with their variant alleles for
`alleles_from_traversal`. There is no command-line program.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Example

```python
from cyptyper.region_label import RegionLabel, RegionType
from cyptyper.regions import overlap_score

label = RegionLabel(RegionType.CYP2D6, "4.001")
print(label.full_allele())                 # CYP2D6*4.001
print(label.simplify_allele(False, {}))    # *4

link = RegionLabel(RegionType.LINK_REGION)
print(label.is_allowed_label_pair(link))   # True

print(overlap_score(range(0, 10), range(5, 100)))  # 0.5
```