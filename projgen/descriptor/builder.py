"""Item groups written into a scaffolded descriptor.

GAC and library references cannot be added to SDK-style projects through
the dotnet CLI, and package references can be written faster as XML than
through one ``dotnet add package`` call each, so both end up here.  Each
helper appends at most one ``<ItemGroup>``; when nothing qualifies no group
is appended at all.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterable, Sequence

from projgen.config import FormatGeneration
from projgen.descriptor.document import append_item_group
from projgen.models import (
    BuildAction,
    CopyToOutputDirectory,
    NuGetPackage,
    ProgrammingLanguage,
    Project,
    ProjectFile,
    Reference,
)


def _needs_file_entry(project_file: ProjectFile) -> bool:
    if project_file.has_build_action(BuildAction.CONTENT):
        return True
    if project_file.has_build_action(BuildAction.NONE):
        return (
            project_file.copy_to_output_directory is not CopyToOutputDirectory.DO_NOT_COPY
            or bool(project_file.additional_msbuild_properties)
        )
    return False


def select_file_entries(
    files: Iterable[ProjectFile], language: ProgrammingLanguage
) -> list[ProjectFile]:
    """Return the files that need an explicit item, in emission order.

    Compile items come first for languages that do not pick them up
    implicitly, followed by Content items and None items that carry a copy
    policy or metadata.
    """
    files = list(files)
    selected: list[ProjectFile] = []
    if not language.implicit_compile_items:
        selected.extend(f for f in files if f.has_build_action(BuildAction.COMPILE))
    selected.extend(f for f in files if _needs_file_entry(f))
    return selected


def _file_item(parent: ET.Element, project_file: ProjectFile) -> ET.Element:
    item = ET.SubElement(parent, project_file.build_action, {"Include": project_file.path})
    if project_file.copy_to_output_directory is not CopyToOutputDirectory.DO_NOT_COPY:
        copy = ET.SubElement(item, "CopyToOutputDirectory")
        copy.text = project_file.copy_to_output_directory.to_msbuild_value()
    for key, value in project_file.additional_msbuild_properties.items():
        ET.SubElement(item, key).text = value
    return item


def append_file_group(
    project_element: ET.Element,
    files: Iterable[ProjectFile],
    language: ProgrammingLanguage,
) -> ET.Element | None:
    """Append an item group listing files with special build handling.

    Returns:
        The appended group, or ``None`` when no file qualified.
    """
    entries = select_file_entries(files, language)
    if not entries:
        return None

    group = append_item_group(project_element)
    for project_file in entries:
        _file_item(group, project_file)
    return group


def append_package_group(
    project_element: ET.Element, packages: Sequence[NuGetPackage]
) -> ET.Element | None:
    """Append ``<PackageReference>`` items, one per package."""
    if not packages:
        return None

    group = append_item_group(project_element)
    for package in packages:
        attributes = {"Include": package.name}
        if package.version:
            attributes["Version"] = package.version
        ET.SubElement(group, "PackageReference", attributes)
    return group


def append_reference_group(
    project_element: ET.Element, references: Sequence[Reference]
) -> ET.Element | None:
    """Append ``<Reference>`` items for assembly references."""
    if not references:
        return None

    group = append_item_group(project_element)
    for reference in references:
        ET.SubElement(group, "Reference", {"Include": reference.name})
    return group


def write_item_groups(
    project_element: ET.Element,
    project: Project,
    generation: FormatGeneration = FormatGeneration.PACKAGE_REFERENCES,
) -> None:
    """Append package, file and reference groups, in that order.

    The package group is skipped for ``DOTNET_ADD_PACKAGE``; the dotnet CLI
    writes those entries itself after the descriptor is saved.
    """
    if generation is FormatGeneration.PACKAGE_REFERENCES:
        append_package_group(project_element, project.nuget_packages)
    append_file_group(project_element, project.files, project.programming_language)
    append_reference_group(project_element, project.references)
