"""Project analysis orchestration.

Each scene, script and meta file is processed independently in a worker
thread. Workers only return values; every shared map is filled on the
event loop thread after ``asyncio.gather`` returns, in sorted path order,
so results never depend on completion order.
"""

import asyncio
import os
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Set

import pendulum
from loguru import logger
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from .config import Settings, settings as default_settings
from .fields import FieldValidator, read_field_names
from .guids import resolve_guid
from .hierarchy import build_hierarchy, dump_path_for, write_dump
from .models import AnalysisReport, SceneResult, ScriptRecord, ScriptReference
from .references import ReferenceExtractor, RegexReferenceExtractor, extract_scene_references
from .scene import parse_scene
from .usage import find_unused, resolve_used_guids, write_report

console = Console()


class AuditorError(Exception):
    """Base class for fatal analysis errors."""


class ProjectNotFoundError(AuditorError):
    def __init__(self, project_path: Path):
        super().__init__(f"Project path '{project_path}' does not exist.")
        self.project_path = project_path


class ProjectAnalyzer:
    """Holds the state of one analysis run over a Unity project."""

    def __init__(
        self,
        project_path: Path,
        output_path: Path,
        settings: Optional[Settings] = None,
        extractor: Optional[ReferenceExtractor] = None,
    ):
        self.project_path = Path(project_path)
        self.output_path = Path(output_path)
        self.settings = settings or default_settings
        self.extractor = extractor or RegexReferenceExtractor(self.settings.internal_field_prefix)
        self.field_validator = FieldValidator()

        self.scripts: Dict[str, ScriptRecord] = {}
        self.guid_to_path: Dict[str, Path] = {}
        self.duplicate_guids: List[str] = []

        self.report = AnalysisReport(project_path=str(self.project_path), output_path=str(self.output_path))

    @property
    def assets_path(self) -> Path:
        return self.project_path / self.settings.assets_dir_name

    def validate(self):
        if not self.project_path.is_dir():
            raise ProjectNotFoundError(self.project_path)
        self.output_path.mkdir(parents=True, exist_ok=True)

    def find_files(self, extension: str) -> List[Path]:
        return sorted(p for p in self.assets_path.rglob(f"*{extension}") if p.is_file())

    def relative_path(self, path: Path) -> str:
        return os.path.relpath(path, self.project_path)

    async def analyze(self, scenes: bool = True, scripts: bool = True, quiet: bool = False) -> AnalysisReport:
        """Run the requested passes and return the populated report."""
        self.validate()
        start_time = pendulum.now()

        if not self.assets_path.is_dir():
            message = f"Assets folder not found at '{self.assets_path}'"
            logger.warning(message)
            self.report.notes.append(message)
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                disable=quiet,
            ) as progress:
                if scenes:
                    await self.dump_hierarchies(progress)
                if scripts:
                    await self.find_unused_scripts(progress)

        self.report.duration = (pendulum.now() - start_time).total_seconds()
        return self.report

    async def _gather(self, fn: Callable, items: Sequence, progress: Progress, description: str) -> list:
        """Apply ``fn`` to every item in bounded worker threads, keeping input order."""
        semaphore = asyncio.Semaphore(self.settings.max_concurrent_files)
        task = progress.add_task(description, total=len(items))

        async def run(item):
            async with semaphore:
                result = await asyncio.to_thread(fn, item)
            progress.advance(task)
            return result

        results = await asyncio.gather(*(run(item) for item in items))
        progress.update(task, description=f"{description} done")
        return results

    # --- Scene Hierarchies ---
    def process_scene(self, scene_path: Path) -> Optional[SceneResult]:
        try:
            scene = parse_scene(scene_path)
        except OSError as e:
            logger.warning(f"Failed to read scene {scene_path}: {e}")
            return None

        lines = build_hierarchy(scene, self.settings.indent_marker, self.settings.max_hierarchy_depth)
        dump_path = dump_path_for(scene_path, self.output_path, self.settings.dump_suffix)
        write_dump(lines, dump_path)
        logger.info(f"Parsed scene {scene_path.name} -> {dump_path.name} ({len(lines)} objects)")

        return SceneResult(
            scene_name=scene_path.name,
            dump_path=str(dump_path),
            lines=len(lines),
            objects=len(scene.objects),
            transforms=len(scene.transforms),
            roots=len(scene.roots),
        )

    async def dump_hierarchies(self, progress: Progress) -> List[SceneResult]:
        scene_files = self.find_files(self.settings.scene_extension)
        results = await self._gather(self.process_scene, scene_files, progress, "[cyan]Dumping scene hierarchies")
        self.report.scenes = [r for r in results if r is not None]
        return self.report.scenes

    # --- Script Usage ---
    def register_scripts(self, script_files: Sequence[Path], guids: Sequence[str]):
        """Merge resolved GUIDs into the run's script maps, last writer wins."""
        for script_file, guid in zip(script_files, guids):
            if not guid:
                continue
            previous = self.guid_to_path.get(guid)
            if previous is not None and previous != script_file:
                logger.warning(
                    f"Duplicate GUID {guid}: {self.relative_path(script_file)} replaces "
                    f"{self.relative_path(previous)}"
                )
                self.duplicate_guids.append(guid)
            self.scripts[guid] = ScriptRecord(guid=guid, relative_path=self.relative_path(script_file))
            self.guid_to_path[guid] = script_file

    def owners_needing_fields(self, references: Sequence[ScriptReference]) -> List[Path]:
        owners: Set[Path] = set()
        for reference in references:
            if not reference.is_attachment and reference.target_guid and reference.owner_guid in self.guid_to_path:
                owners.add(self.guid_to_path[reference.owner_guid])
        return sorted(owners)

    async def find_unused_scripts(self, progress: Progress) -> List[ScriptRecord]:
        script_files = self.find_files(self.settings.script_extension)
        meta_suffix = self.settings.meta_suffix
        guids = await self._gather(
            lambda path: resolve_guid(path, meta_suffix), script_files, progress, "[cyan]Resolving script GUIDs"
        )
        self.register_scripts(script_files, guids)
        logger.info(f"Found {len(self.scripts)} scripts")

        scene_files = self.find_files(self.settings.scene_extension)
        per_scene = await self._gather(
            lambda path: extract_scene_references(path, self.extractor),
            scene_files,
            progress,
            "[cyan]Extracting script references",
        )
        references = [r for scene_references in per_scene for r in scene_references]
        logger.info(f"Found {len(references)} script references in scenes")

        owner_paths = self.owners_needing_fields(references)
        field_sets = await self._gather(read_field_names, owner_paths, progress, "[cyan]Reading script fields")
        for owner_path, names in zip(owner_paths, field_sets):
            self.field_validator.prime(owner_path, names)

        used, stale = resolve_used_guids(references, self.guid_to_path, self.field_validator.field_names)
        logger.info(f"Found {len(used)} unique scripts actually used (after field validation)")

        unused = find_unused(self.scripts.values(), used)
        logger.info(f"Found {len(unused)} unused scripts")

        report_path = self.output_path / self.settings.report_file_name
        write_report(unused, report_path, self.settings.report_header)
        logger.info(f"Written to: {report_path.name}")

        self.report.scripts_found = len(self.scripts)
        self.report.references_found = len(references)
        self.report.used_scripts = len(used)
        self.report.stale_references = stale
        self.report.duplicate_guids = self.duplicate_guids
        self.report.unused = unused
        self.report.report_path = str(report_path)
        return unused


def run_analysis(
    project_path: Path,
    output_path: Path,
    scenes: bool = True,
    scripts: bool = True,
    quiet: bool = True,
    settings: Optional[Settings] = None,
) -> AnalysisReport:
    """Synchronous entry point for a full or partial analysis run."""
    analyzer = ProjectAnalyzer(project_path, output_path, settings=settings)
    return asyncio.run(analyzer.analyze(scenes=scenes, scripts=scripts, quiet=quiet))
