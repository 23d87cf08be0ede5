"""Runtime configuration for unity-auditor.

Every field can be overridden through an ``UNITY_AUDITOR_``-prefixed
environment variable or a ``.env`` file in the working directory.
"""

from pydantic import Field, conint
from pydantic_settings import BaseSettings, SettingsConfigDict


# Configuration
class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_prefix="UNITY_AUDITOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    assets_dir_name: str = "Assets"
    scene_extension: str = ".unity"
    script_extension: str = ".cs"
    meta_suffix: str = ".meta"
    dump_suffix: str = ".dump"
    report_file_name: str = "UnusedScripts.csv"
    report_header: tuple = ("Relative Path", "GUID")
    indent_marker: str = Field("-", min_length=1)
    internal_field_prefix: str = "m_"
    max_hierarchy_depth: conint(ge=1) = 1024
    max_concurrent_files: conint(ge=1) = 8
    log_level: str = "INFO"


settings = Settings()
