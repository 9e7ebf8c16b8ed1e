"""Persistence of the scraped API and its version tag."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from .parser import ApiDocument

logger = logging.getLogger(__name__)

VERSION_FILENAME = "version"
API_FILENAME = "teardown_api2.json"
DEFAULT_OUTPUT = Path("output")


def resolve_output_dir(value: str | None) -> Path:
    if value:
        return Path(value).expanduser().resolve()
    env_value = os.environ.get("TEARDOWN_API_OUTPUT")
    if env_value:
        return Path(env_value).expanduser().resolve()
    return DEFAULT_OUTPUT.resolve()


def load_local_version(root: Path) -> str:
    path = root / VERSION_FILENAME
    if not path.exists():
        return ""
    return path.read_text(encoding="utf-8")


def save_version(root: Path, version: str) -> None:
    root.mkdir(parents=True, exist_ok=True)
    (root / VERSION_FILENAME).write_text(version, encoding="utf-8")


def save_api(root: Path, document: ApiDocument) -> Path:
    path = root / API_FILENAME
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(document.to_dict(), fh, indent=2, ensure_ascii=False)
    return path


def write_github_output(version: str, path: str | Path | None = None) -> bool:
    target = path or os.environ.get("GITHUB_OUTPUT")
    if not target:
        return False
    with Path(target).open("a", encoding="utf-8") as fh:
        fh.write(f"version={version}\n")
    return True


def output_data(root: Path, document: ApiDocument, *, force: bool = False) -> bool:
    """Write ``document`` under ``root`` unless its version is already stored.

    Returns ``False`` without touching any file when the stored version tag
    matches ``document.version`` and ``force`` is not set.
    """

    local_version = load_local_version(root)
    if local_version == document.version and not force:
        logger.info("Stored version %s is current", local_version)
        return False
    if write_github_output(document.version):
        logger.debug("Published version=%s to GITHUB_OUTPUT", document.version)
    save_version(root, document.version)
    path = save_api(root, document)
    logger.info(
        "Wrote %d functions for version %s to %s",
        len(document.functions),
        document.version,
        path,
    )
    return True
