"""
Unity Auditor: Static Unity Project Analysis

Reads a Unity project from disk, without the editor, and produces two outputs:

- **Scene hierarchy dumps:** one ``<scene>.unity.dump`` file per scene listing
  every GameObject reachable from the scene roots, indented two ``-`` per level.
- **Unused script report:** ``UnusedScripts.csv`` lists the MonoBehaviour
  scripts no scene references. A script referenced only through a serialized
  field that no longer exists on the owning class counts as unused.

Requirements:
- Python 3.10 or higher
- Libraries: `loguru`, `rich`, `pydantic`, `pydantic-settings`, `typer`,
  `pendulum`, `PyYAML`, `tree-sitter`, `tree-sitter-c-sharp`.

Usage Examples:
- **Run both passes:**
  `unity-auditor /path/to/UnityProject ./out`
- **Scene dumps only:**
  `unity-auditor /path/to/UnityProject ./out --no-scripts`
- **Unused scripts only:**
  `unity-auditor /path/to/UnityProject ./out --no-scenes`

Settings can be overridden through ``UNITY_AUDITOR_*`` environment variables
or a ``.env`` file (see ``unity_auditor.config.Settings``).

Limitations: nested prefab instances, ScriptableObject assets and scripts
only instantiated at runtime are not analyzed.
"""

from .analyzer import AuditorError, ProjectAnalyzer, ProjectNotFoundError, run_analysis
from .config import Settings, settings

__version__ = "1.0.0"

__all__ = [
    "AuditorError",
    "ProjectAnalyzer",
    "ProjectNotFoundError",
    "Settings",
    "run_analysis",
    "settings",
]
