"""dotnet CLI invocations.

``CommandComposer`` only builds ``DotNetCommand`` values; ``execute`` runs
one.  Keeping the two apart lets the argument lists be tested without a
dotnet SDK installed.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from projgen.models import NuGetPackage, Project, ProjectType
from projgen.utils import run_command

TEMPLATES: dict[ProjectType, str] = {
    ProjectType.LIBRARY: "classlib",
    ProjectType.EXE: "console",
    ProjectType.ASPNETCORE: "web",
}


class UnsupportedProjectTypeError(ValueError):
    """Raised for a project type with no ``dotnet new`` template."""


class CommandError(Exception):
    """Raised when a dotnet invocation fails."""

    def __init__(
        self,
        message: str,
        command: str = "",
        returncode: int | None = None,
        stderr: str = "",
    ):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


@dataclass(frozen=True)
class DotNetCommand:
    """A program, its arguments, and the directory to run it in."""

    program: str
    arguments: tuple[str, ...]
    working_directory: Path | None = None

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.arguments]

    @property
    def arguments_string(self) -> str:
        return " ".join(self.arguments)

    @property
    def command_line(self) -> str:
        return " ".join(self.argv)


class CommandComposer:
    """Builds the dotnet invocations needed to create and extend a project."""

    def __init__(self, dotnet_executable: str = "dotnet", no_restore: bool = True) -> None:
        self.dotnet_executable = dotnet_executable
        self.no_restore = no_restore

    def template_for(self, project_type: ProjectType) -> str:
        try:
            return TEMPLATES[project_type]
        except KeyError:
            raise UnsupportedProjectTypeError(
                f"ProjectType {project_type!r} is not supported"
            ) from None

    def new_project(self, project: Project, folder: str | Path) -> DotNetCommand:
        """``dotnet new <template> -o <folder> -n <name> -lang <language>``."""
        template = self.template_for(project.project_type)
        return DotNetCommand(
            self.dotnet_executable,
            (
                "new",
                template,
                "-o",
                str(folder),
                "-n",
                project.name,
                "-lang",
                project.programming_language.language_option,
            ),
        )

    @staticmethod
    def resolve_reference_paths(
        project_file: str | Path, referenced: Sequence[str | Path]
    ) -> list[Path]:
        """Combine each referenced path with the referencing descriptor's directory.

        The combination is purely lexical: ``..`` segments are kept, and an
        absolute referenced path replaces the directory.
        """
        project_directory = Path(project_file).parent
        return [project_directory / p for p in referenced]

    def add_reference(
        self, project_file: str | Path, referenced: Sequence[str | Path]
    ) -> DotNetCommand | None:
        """``dotnet add <project_file> reference <path> ...``.

        Returns ``None`` when there is nothing to reference.
        """
        if not referenced:
            return None
        paths = self.resolve_reference_paths(project_file, referenced)
        return DotNetCommand(
            self.dotnet_executable,
            ("add", str(project_file), "reference", *(str(p) for p in paths)),
        )

    def add_package(self, project_file: str | Path, package: NuGetPackage) -> DotNetCommand:
        """``dotnet add <project_file> package <name> [-v <version>] [--no-restore]``."""
        arguments = ["add", str(project_file), "package", package.name]
        if package.version:
            arguments.extend(["-v", package.version])
        if self.no_restore:
            arguments.append("--no-restore")
        return DotNetCommand(self.dotnet_executable, tuple(arguments))

    def add_packages(
        self, project_file: str | Path, packages: Sequence[NuGetPackage]
    ) -> list[DotNetCommand]:
        """One ``add package`` command per package; the CLI does not batch them."""
        return [self.add_package(project_file, p) for p in packages]


async def execute(command: DotNetCommand, timeout: int = 300) -> str:
    """Run ``command`` and return its stdout.

    Raises:
        CommandError: If the program cannot be started, times out, or exits
            with a non-zero code.
    """
    try:
        returncode, stdout, stderr = await run_command(
            command.argv, cwd=command.working_directory, timeout=timeout
        )
    except OSError as exc:
        raise CommandError(
            f"Could not start '{command.program}': {exc}",
            command=command.command_line,
        ) from exc

    if returncode != 0:
        details = stderr or stdout
        raise CommandError(
            f"Command failed (exit {returncode}): {command.command_line}\n{details}",
            command=command.command_line,
            returncode=returncode,
            stderr=details,
        )
    return stdout
