"""Creates a project with ``dotnet new`` and reconciles it with a ``Project``.

The writer runs a fixed sequence of stages::

    CREATED -> PLATFORM_ADJUSTED -> TARGET_SET -> GROUPS_WRITTEN -> PERSISTED
            -> REFERENCES_ADDED -> PACKAGES_ADDED -> FILES_WRITTEN

Each stage depends on the previous one, so the stages run strictly one
after the other.  The first failure aborts the run with a
``ProjectCreationNotPossibleError`` naming the stage.  Nothing written so
far is removed; callers inspect the partial output and start again from a
clean directory.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from pathlib import Path

from pydantic import ValidationError
from rich.markup import escape

from projgen.config import Config, FormatGeneration
from projgen.descriptor import (
    DescriptorShapeError,
    WebPlatformAdjustment,
    load_descriptor,
    save_descriptor,
    set_target_frameworks,
    write_item_groups,
)
from projgen.dotnet.commands import CommandComposer, CommandError, DotNetCommand, execute
from projgen.models import Project
from projgen.utils import console, print_stage_header, print_success
from projgen.writer.file_writer import ProjectFileWriter


class Stage(str, Enum):
    """Writer stages, in execution order."""

    CREATED = "Created"
    PLATFORM_ADJUSTED = "PlatformAdjusted"
    TARGET_SET = "TargetSet"
    GROUPS_WRITTEN = "GroupsWritten"
    PERSISTED = "Persisted"
    REFERENCES_ADDED = "ReferencesAdded"
    PACKAGES_ADDED = "PackagesAdded"
    FILES_WRITTEN = "FilesWritten"


STAGE_DESCRIPTIONS: dict[Stage, str] = {
    Stage.CREATED: "Create project with dotnet new",
    Stage.PLATFORM_ADJUSTED: "Adjust for web platform",
    Stage.TARGET_SET: "Set target frameworks",
    Stage.GROUPS_WRITTEN: "Write item groups",
    Stage.PERSISTED: "Save project file",
    Stage.REFERENCES_ADDED: "Add project references",
    Stage.PACKAGES_ADDED: "Add NuGet packages",
    Stage.FILES_WRITTEN: "Write project files",
}


class ProjectCreationNotPossibleError(Exception):
    """Raised when any stage of writing a project fails.

    The underlying error is available as ``__cause__``.
    """

    def __init__(self, stage: Stage, message: str) -> None:
        self.stage = stage
        super().__init__(f"Stage {stage.value} ({STAGE_DESCRIPTIONS[stage]}): {message}")

    def cause_chain(self) -> str:
        """Render this error and every ``__cause__`` below it, one per line."""
        lines = [str(self)]
        cause = self.__cause__
        while cause is not None:
            lines.append(f"  caused by {type(cause).__name__}: {cause}")
            cause = cause.__cause__
        return "\n".join(lines)


# Errors a stage may raise; anything else is a bug and propagates unchanged.
_STAGE_ERRORS = (
    CommandError,
    DescriptorShapeError,
    ValidationError,
    ValueError,
    OSError,
    RuntimeError,
)


class ProjectWriter:
    """Writes a ``Project`` to disk.

    Attributes:
        config: Writer configuration.
        composer: Builds the dotnet command lines.
        file_writer: Writes individual project files.
    """

    def __init__(
        self,
        config: Config | None = None,
        composer: CommandComposer | None = None,
        file_writer: ProjectFileWriter | None = None,
    ) -> None:
        self.config = config or Config()
        self.composer = composer or CommandComposer(
            dotnet_executable=self.config.dotnet_executable,
            no_restore=self.config.no_restore,
        )
        self.file_writer = file_writer or ProjectFileWriter()

    # -- Public API --------------------------------------------------------

    async def write_project(self, project: Project, project_root: str | Path) -> Path:
        """Create the project under ``project_root`` and return its descriptor path.

        Raises:
            ProjectCreationNotPossibleError: If any stage fails.
        """
        root = Path(project_root)
        project_file = root / project.project_file_name

        with self._stage(Stage.CREATED):
            await self._run(self.composer.new_project(project, root))
            tree = load_descriptor(project_file)
        project_element = tree.getroot()

        with self._stage(Stage.PLATFORM_ADJUSTED):
            adjustment = WebPlatformAdjustment.from_config(self.config.web)
            if adjustment.apply(project, project_element):
                console.print(f"  Switched to [bold]{escape(adjustment.sdk)}[/bold]")

        with self._stage(Stage.TARGET_SET):
            set_target_frameworks(project_element, project.target_frameworks)

        with self._stage(Stage.GROUPS_WRITTEN):
            write_item_groups(project_element, project, self.config.format_generation)

        with self._stage(Stage.PERSISTED):
            save_descriptor(tree, project_file)

        with self._stage(Stage.REFERENCES_ADDED):
            await self._add_project_references(project, project_file)

        with self._stage(Stage.PACKAGES_ADDED):
            await self._add_packages(project, project_file)

        with self._stage(Stage.FILES_WRITTEN):
            await self._write_files(project, root)

        print_success(f"Project {project.name} written to {project_file}")
        return project_file

    async def write_references(self, project: Project, project_file: str | Path) -> None:
        """Add ``project.project_references`` to an already written descriptor.

        Raises:
            ProjectCreationNotPossibleError: If ``dotnet add reference`` fails.
        """
        with self._stage(Stage.REFERENCES_ADDED):
            await self._add_project_references(project, Path(project_file))

    # -- Stages ------------------------------------------------------------

    @contextmanager
    def _stage(self, stage: Stage) -> Iterator[None]:
        print_stage_header(list(Stage).index(stage) + 1, STAGE_DESCRIPTIONS[stage])
        try:
            yield
        except ProjectCreationNotPossibleError:
            raise
        except _STAGE_ERRORS as exc:
            raise ProjectCreationNotPossibleError(stage, str(exc)) from exc

    async def _run(self, command: DotNetCommand) -> str:
        console.print(f"  [dim]$ {escape(command.command_line)}[/dim]")
        return await execute(command, timeout=self.config.command_timeout)

    async def _add_project_references(self, project: Project, project_file: Path) -> None:
        command = self.composer.add_reference(
            project_file, [r.path for r in project.project_references]
        )
        if command is None:
            return
        try:
            await self._run(command)
        except CommandError as exc:
            raise CommandError(
                "Writing project references failed",
                command=exc.command,
                returncode=exc.returncode,
                stderr=exc.stderr,
            ) from exc

    async def _add_packages(self, project: Project, project_file: Path) -> None:
        if self.config.format_generation is not FormatGeneration.DOTNET_ADD_PACKAGE:
            return
        for package, command in zip(
            project.nuget_packages,
            self.composer.add_packages(project_file, project.nuget_packages),
        ):
            try:
                await self._run(command)
            except CommandError as exc:
                version = f" {package.version}" if package.version else ""
                raise CommandError(
                    f"Adding NuGet package '{package.name}'{version} failed",
                    command=exc.command,
                    returncode=exc.returncode,
                    stderr=exc.stderr,
                ) from exc

    async def _write_files(self, project: Project, root: Path) -> None:
        for project_file in project.files:
            await asyncio.to_thread(self.file_writer.write, project_file, root)

