"""Pydantic v2 models describing a sample .NET project.

A ``Project`` is built entirely in memory by the test harness and handed to
``ProjectWriter``.  All models are frozen: the writer reads them but never
changes them.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import PurePosixPath, PureWindowsPath
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


_XML_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_.-]*$")
_SAFE_PROJECT_NAME = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]*$")
# Characters outside the XML 1.0 Char production.
_XML_ILLEGAL_CHAR = re.compile("[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


def _xml_text(value: str, what: str) -> str:
    """Reject text that cannot be written into a descriptor."""
    if _XML_ILLEGAL_CHAR.search(value):
        raise ValueError(f"{what} contains characters not allowed in XML: {value!r}")
    return value


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ProgrammingLanguage(str, Enum):
    """Source language of the generated project."""
    CSHARP = "CSharp"
    FSHARP = "FSharp"
    VB = "VB"

    @property
    def project_file_extension(self) -> str:
        """Extension of the descriptor file, e.g. ``csproj``."""
        return {
            ProgrammingLanguage.CSHARP: "csproj",
            ProgrammingLanguage.FSHARP: "fsproj",
            ProgrammingLanguage.VB: "vbproj",
        }[self]

    @property
    def language_option(self) -> str:
        """Value passed to ``dotnet new -lang``."""
        return {
            ProgrammingLanguage.CSHARP: "C#",
            ProgrammingLanguage.FSHARP: "F#",
            ProgrammingLanguage.VB: "VB",
        }[self]

    @property
    def implicit_compile_items(self) -> bool:
        # F# compiles files in declaration order, so they must be listed.
        return self is not ProgrammingLanguage.FSHARP


class ProjectType(str, Enum):
    """Kind of project ``dotnet new`` scaffolds."""
    LIBRARY = "Library"
    EXE = "Exe"
    ASPNETCORE = "ASPNetCore"


class CopyToOutputDirectory(str, Enum):
    """Copy policy of a project file."""
    DO_NOT_COPY = "DoNotCopy"
    COPY_ALWAYS = "CopyAlways"
    COPY_IF_NEWER = "CopyIfNewer"

    def to_msbuild_value(self) -> str:
        """Return the ``<CopyToOutputDirectory>`` text for this policy.

        Raises:
            ValueError: For ``DoNotCopy``, which is expressed by omitting the
                element rather than by a value.
        """
        if self is CopyToOutputDirectory.COPY_IF_NEWER:
            return "PreserveNewest"
        if self is CopyToOutputDirectory.COPY_ALWAYS:
            return "Always"
        raise ValueError(f"{self.value} has no MSBuild CopyToOutputDirectory value")


class BuildAction(str, Enum):
    """Well-known MSBuild item types.

    ``ProjectFile.build_action`` is a plain string so custom item types can
    be used; these members are the values the writer treats specially.
    """
    COMPILE = "Compile"
    CONTENT = "Content"
    NONE = "None"
    EMBEDDED_RESOURCE = "EmbeddedResource"


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

class NuGetPackage(BaseModel):
    """A NuGet package dependency.  ``version=None`` means latest."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Package id")
    version: Optional[str] = Field(default=None, description="Package version")

    @field_validator("name")
    @classmethod
    def _xml_safe_name(cls, value: str) -> str:
        return _xml_text(value, "package name")

    @field_validator("version")
    @classmethod
    def _blank_version_is_unset(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        if value is not None:
            _xml_text(value, "package version")
        return value


class Reference(BaseModel):
    """An opaque assembly (GAC or library) reference."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Assembly name")

    @field_validator("name")
    @classmethod
    def _xml_safe_name(cls, value: str) -> str:
        return _xml_text(value, "reference name")


class ProjectReference(BaseModel):
    """Reference to another project's descriptor file."""
    model_config = ConfigDict(frozen=True)

    path: str = Field(
        ...,
        min_length=1,
        description="Descriptor path, relative to the referencing descriptor's directory",
    )


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------

class ProjectFile(BaseModel):
    """A file placed inside the generated project."""
    model_config = ConfigDict(frozen=True)

    path: str = Field(..., min_length=1, description="Path relative to the project root")
    content: str = Field(default="", description="Text written to the file")
    build_action: str = Field(default=BuildAction.COMPILE.value, description="MSBuild item type")
    copy_to_output_directory: CopyToOutputDirectory = Field(
        default=CopyToOutputDirectory.DO_NOT_COPY
    )
    additional_msbuild_properties: dict[str, str] = Field(
        default_factory=dict,
        description="Item metadata written as child elements, in insertion order",
    )

    @field_validator("path")
    @classmethod
    def _relative_path(cls, value: str) -> str:
        _xml_text(value, "file path")
        if PurePosixPath(value).is_absolute() or PureWindowsPath(value).is_absolute():
            raise ValueError(f"file path must be relative: {value!r}")
        parts = value.replace("\\", "/").split("/")
        if ".." in parts:
            raise ValueError(f"file path must stay inside the project: {value!r}")
        return value

    @field_validator("build_action")
    @classmethod
    def _item_type_name(cls, value: str) -> str:
        if not _XML_NAME.match(value):
            raise ValueError(f"build action is not a valid MSBuild item type: {value!r}")
        return value

    @field_validator("additional_msbuild_properties")
    @classmethod
    def _property_names(cls, value: dict[str, str]) -> dict[str, str]:
        for key in value:
            if not _XML_NAME.match(key):
                raise ValueError(f"invalid MSBuild property name: {key!r}")
            _xml_text(value[key], f"MSBuild property {key!r}")
        return value

    def has_build_action(self, action: BuildAction) -> bool:
        """Case-insensitive comparison against a well-known build action."""
        return self.build_action.upper() == action.value.upper()


# ---------------------------------------------------------------------------
# Project
# ---------------------------------------------------------------------------

class Project(BaseModel):
    """Complete in-memory description of one project to generate."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Project name; also the descriptor file stem")
    programming_language: ProgrammingLanguage = Field(default=ProgrammingLanguage.CSHARP)
    project_type: ProjectType = Field(default=ProjectType.LIBRARY)
    target_frameworks: list[str] = Field(
        ..., min_length=1, description="Target framework monikers, e.g. 'net6.0'"
    )
    nuget_packages: list[NuGetPackage] = Field(default_factory=list)
    references: list[Reference] = Field(default_factory=list)
    project_references: list[ProjectReference] = Field(default_factory=list)
    files: list[ProjectFile] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _filesystem_safe_name(cls, value: str) -> str:
        if not value or not _SAFE_PROJECT_NAME.match(value) or value.strip(".") == "":
            raise ValueError(f"project name must be non-empty and filesystem-safe: {value!r}")
        return value

    @field_validator("target_frameworks")
    @classmethod
    def _non_blank_frameworks(cls, value: list[str]) -> list[str]:
        for framework in value:
            if not framework.strip() or ";" in framework:
                raise ValueError(f"invalid target framework: {framework!r}")
            _xml_text(framework, "target framework")
        return value

    @model_validator(mode="after")
    def _unique_file_paths(self) -> "Project":
        seen: set[PurePosixPath] = set()
        for project_file in self.files:
            key = PurePosixPath(project_file.path.replace("\\", "/"))
            if key in seen:
                raise ValueError(f"duplicate project file path: {project_file.path!r}")
            seen.add(key)
        return self

    @property
    def project_file_name(self) -> str:
        """Descriptor file name, e.g. ``Calc.csproj``."""
        return f"{self.name}.{self.programming_language.project_file_extension}"

    @property
    def target_framework_moniker(self) -> str:
        """Target frameworks joined with ``;`` in the given order."""
        return ";".join(self.target_frameworks)
