"""GUID lookup through Unity ``.meta`` sidecar files."""

import re
from pathlib import Path

from loguru import logger

from .config import settings

GUID_PATTERN = re.compile(r"^guid:\s*([a-fA-F0-9]+)", re.MULTILINE)


def meta_path_for(source: Path, meta_suffix: str = settings.meta_suffix) -> Path:
    return source.with_name(source.name + meta_suffix)


def extract_guid(meta_path: Path) -> str:
    """Return the first ``guid:`` value of a meta file, or an empty string."""
    content = meta_path.read_text(encoding="utf-8", errors="replace")
    match = GUID_PATTERN.search(content)
    return match.group(1) if match else ""


def resolve_guid(source: Path, meta_suffix: str = settings.meta_suffix) -> str:
    """Resolve the GUID Unity assigned to ``source``.

    An empty string means the file is unregistered: its sidecar is missing,
    unreadable or carries no ``guid:`` line.
    """
    meta_path = meta_path_for(source, meta_suffix)
    if not meta_path.is_file():
        logger.debug(f"No meta file for {source}")
        return ""
    try:
        guid = extract_guid(meta_path)
    except OSError as e:
        logger.warning(f"Failed to read meta file {meta_path}: {e}")
        return ""
    if not guid:
        logger.debug(f"No guid entry in {meta_path}")
    return guid
