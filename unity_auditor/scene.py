"""Unity scene document model.

A ``.unity`` file is a stream of YAML documents, each introduced by a
header line such as ``--- !u!4 &1234567``. The class id after ``!u!``
is not used; documents are classified by the top-level key of their body
and joined through the anchor id.
"""

import re
from pathlib import Path
from typing import Any, Iterator, List, Optional, Tuple

import yaml
from loguru import logger

from .models import DocumentKind, ObjectNode, SceneDocuments, TransformNode

DOCUMENT_HEADER = re.compile(r"^--- !u!(-?\d+) &(-?\d+)(?:[ \t]+stripped)?[ \t]*\r?$", re.MULTILINE)

OBJECT_KEY = "GameObject"
TRANSFORM_KEYS = ("Transform", "RectTransform")
ROOT_LIST_KEY = "SceneRoots"

NO_PARENT = "0"


def split_documents(text: str) -> Iterator[Tuple[str, str]]:
    """Yield ``(anchor_id, body)`` for every document in a scene file.

    Text before the first header (the ``%YAML``/``%TAG`` preamble) is dropped.
    """
    headers = list(DOCUMENT_HEADER.finditer(text))
    for i, header in enumerate(headers):
        end = headers[i + 1].start() if i + 1 < len(headers) else len(text)
        yield header.group(2), text[header.end():end]


def classify_document(body: Any) -> DocumentKind:
    if not isinstance(body, dict):
        return DocumentKind.UNKNOWN
    if OBJECT_KEY in body:
        return DocumentKind.OBJECT
    if any(key in body for key in TRANSFORM_KEYS):
        return DocumentKind.TRANSFORM
    if ROOT_LIST_KEY in body:
        return DocumentKind.ROOT_LIST
    return DocumentKind.UNKNOWN


def _scalar(value: Any) -> str:
    return "" if value is None else str(value)


def _file_id(reference: Any) -> Optional[str]:
    """Return the ``fileID`` of a ``{fileID: ...}`` reference literal."""
    if isinstance(reference, dict) and "fileID" in reference:
        return _scalar(reference["fileID"])
    return None


def _file_ids(sequence: Any) -> List[str]:
    if not isinstance(sequence, list):
        return []
    ids = []
    for item in sequence:
        file_id = _file_id(item)
        if file_id is not None:
            ids.append(file_id)
    return ids


def parse_object(anchor: str, body: dict) -> Optional[ObjectNode]:
    node = body.get(OBJECT_KEY)
    if not isinstance(node, dict) or "m_Name" not in node:
        return None
    return ObjectNode(id=anchor, name=_scalar(node["m_Name"]))


def parse_transform(anchor: str, body: dict) -> Optional[TransformNode]:
    """Read a ``Transform`` or UI ``RectTransform`` document."""
    node = next((body[key] for key in TRANSFORM_KEYS if key in body), None)
    if not isinstance(node, dict):
        return None

    parent_id = _file_id(node.get("m_Father"))
    if parent_id == NO_PARENT:
        parent_id = None

    return TransformNode(
        id=anchor,
        owner_object_id=_file_id(node.get("m_GameObject")) or "",
        parent_id=parent_id,
        child_ids=_file_ids(node.get("m_Children")),
    )


def parse_root_list(body: dict) -> List[str]:
    node = body.get(ROOT_LIST_KEY)
    if not isinstance(node, dict):
        return []
    return _file_ids(node.get("m_Roots"))


def load_document(anchor: str, raw: str, source: str = "<scene>") -> Any:
    """Load one document body, returning None when it is not valid YAML.

    Scalars are kept as strings so names such as ``Yes`` or ``007`` and
    large file ids survive untouched.
    """
    try:
        return yaml.load(raw, Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        logger.warning(f"Skipping unreadable document &{anchor} in {source}: {e}")
        return None


def parse_scene_text(text: str, source: str = "<scene>") -> SceneDocuments:
    scene = SceneDocuments()

    for anchor, raw in split_documents(text):
        body = load_document(anchor, raw, source)
        kind = classify_document(body)

        if kind is DocumentKind.OBJECT:
            game_object = parse_object(anchor, body)
            if game_object is not None:
                scene.objects[anchor] = game_object
            else:
                logger.debug(f"GameObject &{anchor} in {source} has no name; skipped")
        elif kind is DocumentKind.TRANSFORM:
            transform = parse_transform(anchor, body)
            if transform is not None:
                scene.transforms[anchor] = transform
        elif kind is DocumentKind.ROOT_LIST:
            scene.roots = parse_root_list(body)

    return scene


def parse_scene(path: Path) -> SceneDocuments:
    """Parse a scene file into its object, transform and root-list records."""
    text = path.read_text(encoding="utf-8", errors="replace")
    scene = parse_scene_text(text, source=path.name)
    logger.debug(
        f"{path.name}: {len(scene.objects)} objects, "
        f"{len(scene.transforms)} transforms, {len(scene.roots)} roots"
    )
    return scene
