[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cyptyper"
version = "0.1.0"
description = "CYP2D6 region labelling, variant loading, haplotype assignment and chain visualisation helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["CYP2D6", "pharmacogenomics", "haplotype", "star-allele", "genotyping"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cyptyper"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
