"""Scene hierarchy reconstruction and ``.dump`` output."""

from pathlib import Path
from typing import List, Set, Tuple

from loguru import logger

from .config import settings
from .models import SceneDocuments


def indent(depth: int, marker: str = settings.indent_marker) -> str:
    return "" if depth == 0 else marker * (depth * 2)


def build_hierarchy(
    scene: SceneDocuments,
    marker: str = settings.indent_marker,
    max_depth: int = settings.max_hierarchy_depth,
) -> List[str]:
    """Render the scene tree as indented object names in pre-order.

    Roots are emitted in ``SceneRoots`` order and children in ``m_Children``
    order. A branch ends silently at a transform that is missing or whose
    GameObject is missing. A transform reached twice, or nested deeper than
    ``max_depth``, is reported and not expanded.
    """
    lines: List[str] = []
    visited: Set[str] = set()

    for root_id in scene.roots:
        stack: List[Tuple[str, int]] = [(root_id, 0)]
        while stack:
            transform_id, depth = stack.pop()

            transform = scene.transforms.get(transform_id)
            if transform is None:
                continue
            game_object = scene.objects.get(transform.owner_object_id)
            if game_object is None:
                continue

            if transform_id in visited:
                logger.warning(f"Transform &{transform_id} reached more than once; cycle or shared child skipped")
                continue
            if depth > max_depth:
                logger.warning(f"Hierarchy deeper than {max_depth} at '{game_object.name}'; branch truncated")
                continue
            visited.add(transform_id)

            lines.append(f"{indent(depth, marker)}{game_object.name}")
            for child_id in reversed(transform.child_ids):
                stack.append((child_id, depth + 1))

    return lines


def write_dump(lines: List[str], path: Path):
    """Write one line per object, each terminated by a newline."""
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        for line in lines:
            f.write(line + "\n")


def dump_path_for(scene_path: Path, output_dir: Path, dump_suffix: str = settings.dump_suffix) -> Path:
    return output_dir / f"{scene_path.name}{dump_suffix}"
