"""
Batch manifest loading.

A manifest is a YAML file describing one render batch:

    output_dir: outs/pdfs          # optional, relative to the manifest's directory
    target_class: "#content"       # optional
    entries:
      - url: https://example.com/a
        output: a.pdf
      - url: https://example.com/b
        output: b.pdf

Entries can also be given on the command line as "URL=OUTPUT.pdf" pairs or
bare URLs, in which case the output name is derived from the URL.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional
from urllib.parse import urlparse

from omegaconf import OmegaConf

from pagefit.contexts.rendering.models import UrlEntry


class InvalidManifestError(ValueError):
    """
    Exception raised when a manifest or entry list is malformed.

    Attributes:
        message: Error description
        source: Manifest path or argument the error came from
    """

    def __init__(self, message: str, source: Optional[str] = None):
        self.message = message
        self.source = source
        super().__init__(f"{message} ({source})" if source else message)


@dataclass
class Manifest:
    """
    Parsed render batch.

    Attributes:
        entries: Entries in manifest order
        output_dir: Output directory from the manifest (None = use the caller's)
        target_class: Target selector from the manifest (None = use the caller's)
        source: Path of the manifest file
    """

    entries: List[UrlEntry]
    output_dir: Optional[Path] = None
    target_class: Optional[str] = None
    source: Optional[Path] = None


def load_manifest(manifest_path: Path) -> Manifest:
    """
    Load a YAML manifest.

    Args:
        manifest_path: Path to the manifest file

    Returns:
        Manifest with validated entries

    Raises:
        FileNotFoundError: If the manifest does not exist
        InvalidManifestError: If the structure is invalid
    """
    manifest_path = Path(manifest_path)
    if not manifest_path.exists():
        raise FileNotFoundError(f"Manifest not found: {manifest_path}")

    data = OmegaConf.to_container(OmegaConf.load(manifest_path), resolve=True)
    source = str(manifest_path)

    if not isinstance(data, dict):
        raise InvalidManifestError("Manifest must be a mapping with an 'entries' list", source)

    raw_entries = data.get("entries")
    if not isinstance(raw_entries, list) or not raw_entries:
        raise InvalidManifestError("Manifest has no entries", source)

    entries = []
    for position, raw in enumerate(raw_entries, start=1):
        if not isinstance(raw, dict):
            raise InvalidManifestError(f"Entry {position} must be a mapping", source)
        url = raw.get("url")
        if not url:
            raise InvalidManifestError(f"Entry {position} is missing 'url'", source)
        output = raw.get("output") or default_output_name(str(url))
        entries.append(UrlEntry(url=str(url), output=str(output)))

    _check_unique_outputs(entries, source)

    target_class = data.get("target_class")
    if target_class is not None and (not isinstance(target_class, str) or not target_class.strip()):
        raise InvalidManifestError("'target_class' must be a non-empty selector string", source)

    output_dir = data.get("output_dir")
    if output_dir is not None:
        output_dir = Path(output_dir)
        if not output_dir.is_absolute():
            output_dir = manifest_path.parent / output_dir

    return Manifest(
        entries=entries,
        output_dir=output_dir,
        target_class=target_class,
        source=manifest_path,
    )


def parse_entry_pairs(values: Iterable[str]) -> List[UrlEntry]:
    """
    Parse command-line entries.

    Each value is either "URL=OUTPUT.pdf" or a bare URL. Values are split on
    the last "=" only when the right-hand side ends in ".pdf", so query strings
    in bare URLs survive.

    Examples:
        >>> parse_entry_pairs(["https://example.com/a=a.pdf"])
        [UrlEntry(url='https://example.com/a', output='a.pdf')]

        >>> parse_entry_pairs(["https://example.com/search?q=1"])
        [UrlEntry(url='https://example.com/search?q=1', output='example.com_search.pdf')]
    """
    entries = []
    for value in values:
        url, separator, output = value.rpartition("=")
        if separator and output.lower().endswith(".pdf"):
            if not url:
                raise InvalidManifestError("Entry is missing its URL", value)
        else:
            url, output = value, default_output_name(value)

        if not url.strip():
            raise InvalidManifestError("Entry is empty", value)
        entries.append(UrlEntry(url=url.strip(), output=output.strip()))

    _check_unique_outputs(entries, "command line")
    return entries


def default_output_name(url: str) -> str:
    """
    Derive an output file name from a URL: host and path, sanitized.

    Examples:
        default_output_name("https://example.com/docs/intro")  # "example.com_docs_intro.pdf"
        default_output_name("https://example.com/")            # "example.com.pdf"
    """
    parsed = urlparse(url)
    path = re.sub(r"\.html?$", "", parsed.path)
    name = re.sub(r"[^A-Za-z0-9.-]+", "_", f"{parsed.netloc}{path}").strip("_.")
    return f"{name or 'page'}.pdf"


def _check_unique_outputs(entries: List[UrlEntry], source: str) -> None:
    seen = set()
    for entry in entries:
        if entry.output in seen:
            raise InvalidManifestError(f"Duplicate output '{entry.output}'", source)
        seen.add(entry.output)
