"""Script usage resolution and the unused-script report."""

import csv
import os
from pathlib import Path
from typing import Callable, Dict, FrozenSet, Iterable, List, Set, Tuple

from loguru import logger

from .config import settings
from .models import ScriptRecord, ScriptReference

FieldLookup = Callable[[Path], FrozenSet[str]]


def resolve_used_guids(
    references: Iterable[ScriptReference],
    guid_to_path: Dict[str, Path],
    field_lookup: FieldLookup,
) -> Tuple[Set[str], int]:
    """Collect the GUIDs provably used by scene content.

    Owners are used as soon as they are attached. A field target is used
    only when the owner script still declares that field; otherwise the
    reference is stale and counted. Returns ``(used, stale_count)``.
    """
    used: Set[str] = set()
    stale = 0

    for reference in references:
        used.add(reference.owner_guid)

        if reference.is_attachment or not reference.target_guid:
            continue

        owner_path = guid_to_path.get(reference.owner_guid)
        if owner_path is None:
            continue

        if reference.field_name in field_lookup(owner_path):
            used.add(reference.target_guid)
        else:
            stale += 1
            logger.debug(
                f"Stale reference: {owner_path.name} has no field "
                f"'{reference.field_name}' (target {reference.target_guid})"
            )

    return used, stale


def report_sort_key(script: ScriptRecord) -> Tuple[int, str]:
    return script.relative_path.count(os.sep), script.relative_path


def find_unused(scripts: Iterable[ScriptRecord], used: Set[str]) -> List[ScriptRecord]:
    """Scripts absent from ``used``, shallowest paths first then by path."""
    return sorted((s for s in scripts if s.guid not in used), key=report_sort_key)


def write_report(unused: List[ScriptRecord], path: Path, header: Tuple[str, str] = settings.report_header):
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow(header)
        for script in unused:
            writer.writerow([script.relative_path, script.guid])
