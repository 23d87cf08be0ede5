import sys
from pathlib import Path
from typing import Dict, List

import pytest
from loguru import logger

PLAYER_GUID = "1f0a3b5c7d9e4f6a8b0c2d4e6f8a0b1c"
WEAPON_GUID = "2a4c6e8f0b1d3f5a7c9e1b3d5f7a9c0e"
ORPHAN_GUID = "3b5d7f9a1c3e5a7c9e0b2d4f6a8c0e2a"
HELPER_GUID = "4c6e8a0b2d4f6a8c0e1b3d5f7a9c1e3b"

SCENE_HEADER = """%YAML 1.1
%TAG !u! tag:unity3d.com,2011:
"""


def game_object(file_id: str, name: str, transform_id: str) -> str:
    return f"""--- !u!1 &{file_id}
GameObject:
  m_ObjectHideFlags: 0
  serializedVersion: 6
  m_Component:
  - component: {{fileID: {transform_id}}}
  m_Layer: 0
  m_Name: {name}
  m_TagString: Untagged
  m_IsActive: 1
"""


def transform(file_id: str, owner_id: str, parent_id: str = "0", children: List[str] = (), key: str = "Transform") -> str:
    if children:
        children_yaml = "\n" + "".join(f"  - {{fileID: {c}}}\n" for c in children)
    else:
        children_yaml = " []\n"
    return f"""--- !u!4 &{file_id}
{key}:
  m_ObjectHideFlags: 0
  m_GameObject: {{fileID: {owner_id}}}
  serializedVersion: 2
  m_LocalRotation: {{x: 0, y: 0, z: 0, w: 1}}
  m_LocalPosition: {{x: 0, y: 0, z: 0}}
  m_Children:{children_yaml}  m_Father: {{fileID: {parent_id}}}
"""


def scene_roots(roots: List[str]) -> str:
    entries = "".join(f"  - {{fileID: {r}}}\n" for r in roots)
    return f"""--- !u!1660057539 &9223372036854775807
SceneRoots:
  m_ObjectHideFlags: 0
  m_Roots:
{entries}"""


def mono_behaviour(file_id: str, owner_object: str, script_guid: str, fields: Dict[str, str] = None) -> str:
    field_yaml = "".join(
        f"  {name}: {{fileID: 11500000, guid: {guid}, type: 3}}\n" for name, guid in (fields or {}).items()
    )
    return f"""--- !u!114 &{file_id}
MonoBehaviour:
  m_ObjectHideFlags: 0
  m_GameObject: {{fileID: {owner_object}}}
  m_Enabled: 1
  m_EditorHideFlags: 0
  m_Script: {{fileID: 11500000, guid: {script_guid}, type: 3}}
  m_Name:
  m_EditorClassIdentifier:
{field_yaml}"""


def scene_text(*documents: str) -> str:
    return SCENE_HEADER + "".join(documents)


PARENT_CHILD_SCENE = scene_text(
    game_object("100", "Parent", "101"),
    transform("101", "100", children=["201"]),
    game_object("200", "Child", "201"),
    transform("201", "200", parent_id="101"),
    scene_roots(["101"]),
)


PLAYER_SOURCE = """using UnityEngine;

public class Player : MonoBehaviour
{
    public Weapon target;
    [SerializeField] private int health = 100;
    public static int instances;
    const float Speed = 2f;
}
"""

PLAYER_WITHOUT_TARGET_SOURCE = """using UnityEngine;

public class Player : MonoBehaviour
{
    public Weapon primaryWeapon;
}
"""

WEAPON_SOURCE = """using UnityEngine;

public class Weapon : MonoBehaviour
{
    public float damage;
}
"""

ORPHAN_SOURCE = """public class Orphan
{
    private int count;
}
"""


def meta_text(guid: str) -> str:
    return f"""fileFormatVersion: 2
guid: {guid}
MonoImporter:
  externalObjects: {{}}
  serializedVersion: 2
  defaultReferences: []
  executionOrder: 0
"""


class UnityProjectBuilder:
    """Writes a minimal Unity project layout under a temporary directory."""

    def __init__(self, root: Path):
        self.root = root
        self.assets = root / "Assets"
        self.assets.mkdir(parents=True, exist_ok=True)

    def script(self, relative: str, source: str, guid: str = None) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
        if guid is not None:
            path.with_name(path.name + ".meta").write_text(meta_text(guid), encoding="utf-8")
        return path

    def scene(self, relative: str, text: str) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path


@pytest.fixture
def project(tmp_path) -> UnityProjectBuilder:
    return UnityProjectBuilder(tmp_path / "MyGame")


@pytest.fixture
def output_dir(tmp_path) -> Path:
    return tmp_path / "out"


@pytest.fixture
def log_messages():
    """Capture loguru messages emitted during a test."""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    # CLI tests rebind the sink to a captured stream that is closed afterwards
    logger.remove()
    logger.add(sys.stderr, level="WARNING")
