"""Shared pytest fixtures for the projgen test suite.

Provides reusable fixtures for:
- Temporary project directories
- A descriptor as ``dotnet new classlib`` writes it
- Sample project descriptions
- Mock subprocess helpers and a fake ``dotnet`` for the writer
"""

from __future__ import annotations

import textwrap
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from projgen.dotnet.commands import DotNetCommand
from projgen.models import (
    CopyToOutputDirectory,
    NuGetPackage,
    ProgrammingLanguage,
    Project,
    ProjectFile,
    ProjectType,
)


SCAFFOLD_CSPROJ = textwrap.dedent("""\
    <Project Sdk="Microsoft.NET.Sdk">

      <PropertyGroup>
        <TargetFramework>net8.0</TargetFramework>
        <ImplicitUsings>enable</ImplicitUsings>
        <Nullable>enable</Nullable>
      </PropertyGroup>

    </Project>
""")


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Temporary directory for a generated project (auto-cleanup)."""
    project_dir = tmp_path / "Calc"
    project_dir.mkdir()
    yield project_dir


@pytest.fixture
def scaffold_descriptor(tmp_path: Path) -> Path:
    """A freshly scaffolded ``Calc.csproj`` on disk."""
    path = tmp_path / "Calc.csproj"
    path.write_text(SCAFFOLD_CSPROJ, encoding="utf-8")
    return path


@pytest.fixture
def project_element() -> ET.Element:
    """Root ``<Project>`` element of a freshly scaffolded descriptor."""
    return ET.fromstring(SCAFFOLD_CSPROJ)


# ---------------------------------------------------------------------------
# Sample projects
# ---------------------------------------------------------------------------

@pytest.fixture
def calc_project() -> Project:
    """Minimal multi-targeted class library."""
    return Project(
        name="Calc",
        programming_language=ProgrammingLanguage.CSHARP,
        project_type=ProjectType.LIBRARY,
        target_frameworks=["net6.0", "net472"],
    )


@pytest.fixture
def full_project() -> Project:
    """Project using every kind of dependency and file."""
    return Project(
        name="Calc",
        target_frameworks=["net6.0", "net472"],
        nuget_packages=[
            NuGetPackage(name="SpecFlow", version="3.9.74"),
            NuGetPackage(name="xunit"),
        ],
        references=[{"name": "System.Configuration"}],
        project_references=[{"path": "../Steps/Steps.csproj"}],
        files=[
            ProjectFile(path="Calculator.cs", content="namespace Calc;\n"),
            ProjectFile(
                path="data.json",
                content="{}",
                build_action="None",
                copy_to_output_directory=CopyToOutputDirectory.COPY_IF_NEWER,
            ),
            ProjectFile(path="Features/Add.feature", content="Feature: Add\n", build_action="Content"),
        ],
    )


# ---------------------------------------------------------------------------
# Mock subprocess / dotnet
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory


class FakeDotNet:
    """Stands in for ``projgen.writer.project_writer.execute``.

    Records every command and, for ``dotnet new``, writes the scaffold
    descriptor into the ``-o`` folder the way the real CLI would.
    """

    def __init__(self, descriptor_text: str = SCAFFOLD_CSPROJ) -> None:
        self.descriptor_text = descriptor_text
        self.commands: list[DotNetCommand] = []
        self.failures: dict[str, Exception] = {}

    def fail_on(self, verb: str, error: Exception) -> None:
        """Raise ``error`` for the first command whose arguments contain ``verb``."""
        self.failures[verb] = error

    async def __call__(self, command: DotNetCommand, timeout: int = 300) -> str:
        self.commands.append(command)
        for verb, error in self.failures.items():
            if verb in command.arguments:
                raise error
        if command.arguments[0] == "new":
            args: dict[str, Any] = dict(zip(command.arguments[2::2], command.arguments[3::2]))
            folder = Path(args["-o"])
            extension = {"C#": "csproj", "F#": "fsproj", "VB": "vbproj"}[args["-lang"]]
            folder.mkdir(parents=True, exist_ok=True)
            (folder / f"{args['-n']}.{extension}").write_text(self.descriptor_text, encoding="utf-8")
        return ""


@pytest.fixture
def fake_dotnet() -> FakeDotNet:
    return FakeDotNet()
