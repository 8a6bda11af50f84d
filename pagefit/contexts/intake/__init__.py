"""
Intake Context

Responsibilities:
- Loads render batches from YAML manifests
- Parses URL=OUTPUT pairs given on the command line
- Derives output names for bare URLs

Owns: Batch descriptions
Never: Talks to the browser
"""

from pagefit.contexts.intake.manifest import (
    InvalidManifestError,
    Manifest,
    default_output_name,
    load_manifest,
    parse_entry_pairs,
)

__all__ = [
    "InvalidManifestError",
    "Manifest",
    "default_output_name",
    "load_manifest",
    "parse_entry_pairs",
]
