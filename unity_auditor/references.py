"""MonoBehaviour reference extraction from raw scene text.

Attachment blocks mix engine-internal and user fields with no fixed
schema and are matched as text, not through the scene document model.
Usage resolution only depends on the :class:`ReferenceExtractor` protocol.
"""

import re
from pathlib import Path
from typing import List, Protocol

from loguru import logger

from .config import settings
from .models import ScriptReference

MONOBEHAVIOUR_BLOCK = re.compile(
    r"--- !u!114 &-?\d+\s+MonoBehaviour:.*?(?=--- !u!|\Z)",
    re.DOTALL,
)
OWNER_SCRIPT = re.compile(
    r"m_Script:\s*\{fileID:\s*11500000,\s*guid:\s*([a-f0-9]+),\s*type:\s*3\}"
)
FIELD_REFERENCE = re.compile(
    r"^\s+(\w+):\s*\{(?:fileID:\s*11500000,\s*)?guid:\s*([a-f0-9]+)",
    re.MULTILINE,
)


class ReferenceExtractor(Protocol):
    def extract(self, text: str) -> List[ScriptReference]:
        ...


class RegexReferenceExtractor:
    """Pattern scan over MonoBehaviour blocks."""

    def __init__(self, internal_prefix: str = settings.internal_field_prefix):
        self.internal_prefix = internal_prefix

    def extract(self, text: str) -> List[ScriptReference]:
        references = []
        for block in MONOBEHAVIOUR_BLOCK.finditer(text):
            references.extend(self.extract_block(block.group(0)))
        return references

    def extract_block(self, block: str) -> List[ScriptReference]:
        owner = OWNER_SCRIPT.search(block)
        if not owner:
            return []
        owner_guid = owner.group(1)

        references = [ScriptReference(owner_guid=owner_guid)]
        for match in FIELD_REFERENCE.finditer(block):
            field_name, target_guid = match.groups()
            # the owner's own script slot is never a field reference
            if match.start(1) == owner.start():
                continue
            if field_name.startswith(self.internal_prefix):
                continue
            references.append(ScriptReference(
                owner_guid=owner_guid,
                field_name=field_name,
                target_guid=target_guid,
            ))
        return references


def extract_scene_references(path: Path, extractor: ReferenceExtractor) -> List[ScriptReference]:
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning(f"Failed to read scene {path}: {e}")
        return []
    references = extractor.extract(text)
    logger.debug(f"{path.name}: {len(references)} script references")
    return references
