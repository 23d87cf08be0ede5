"""Data models shared by the scene and script passes."""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, confloat


class DocumentKind(Enum):
    """Structural kind of one scene document, decided by its key shape"""
    OBJECT = "object"
    TRANSFORM = "transform"
    ROOT_LIST = "root_list"
    UNKNOWN = "unknown"


# --- Scene Models ---
class ObjectNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class TransformNode(BaseModel):
    id: str
    owner_object_id: str = ""
    parent_id: Optional[str] = None
    child_ids: List[str] = []


class SceneDocuments(BaseModel):
    """Records collected from one scene file, keyed by document anchor id"""
    objects: Dict[str, ObjectNode] = {}
    transforms: Dict[str, TransformNode] = {}
    roots: List[str] = []


# --- Script Models ---
class ScriptRecord(BaseModel):
    guid: str
    relative_path: str


class ScriptReference(BaseModel):
    """A script GUID seen in a MonoBehaviour block.

    An empty ``field_name`` records the attachment of ``owner_guid``
    itself; otherwise ``target_guid`` is the value of that serialized field.
    """
    model_config = ConfigDict(frozen=True)

    owner_guid: str
    field_name: str = ""
    target_guid: str = ""

    @property
    def is_attachment(self) -> bool:
        return not self.field_name


# --- Run Results ---
class SceneResult(BaseModel):
    scene_name: str
    dump_path: str
    lines: int = 0
    objects: int = 0
    transforms: int = 0
    roots: int = 0


class AnalysisReport(BaseModel):
    project_path: str
    output_path: str
    scenes: List[SceneResult] = []
    scripts_found: int = 0
    references_found: int = 0
    used_scripts: int = 0
    stale_references: int = 0
    duplicate_guids: List[str] = []
    unused: List[ScriptRecord] = []
    report_path: Optional[str] = None
    duration: confloat(ge=0.0) = 0.0
    notes: List[str] = Field(default_factory=list)
