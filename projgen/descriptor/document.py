"""Loading and saving SDK-style project descriptors."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

PROJECT_TAG = "Project"
ITEM_GROUP_TAG = "ItemGroup"
PROPERTY_GROUP_TAG = "PropertyGroup"


class DescriptorShapeError(Exception):
    """Raised when a descriptor lacks a node the writer needs.

    Usually means the installed ``dotnet`` templates produce a different
    layout than expected.
    """

    def __init__(self, message: str, path: str | Path | None = None):
        self.path = Path(path) if path is not None else None
        super().__init__(message)


def load_descriptor(path: str | Path) -> ET.ElementTree:
    """Parse a descriptor and check it is rooted at ``<Project>``.

    Raises:
        DescriptorShapeError: If the file is not well-formed XML or its root
            element is not ``Project``.
    """
    descriptor_path = Path(path)
    # Comments and processing instructions survive the rewrite.
    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True, insert_pis=True))
    try:
        tree = ET.parse(descriptor_path, parser=parser)
    except ET.ParseError as exc:
        raise DescriptorShapeError(
            f"Project file '{descriptor_path}' is not well-formed XML: {exc}",
            path=descriptor_path,
        ) from exc

    if tree.getroot().tag != PROJECT_TAG:
        raise DescriptorShapeError(
            f"No '{PROJECT_TAG}' tag could be found in project file '{descriptor_path}'",
            path=descriptor_path,
        )
    return tree


def save_descriptor(tree: ET.ElementTree, path: str | Path) -> Path:
    """Pretty-print and write the descriptor without an XML declaration."""
    descriptor_path = Path(path)
    ET.indent(tree, space="  ")
    tree.write(descriptor_path, encoding="utf-8", xml_declaration=False)
    with descriptor_path.open("a", encoding="utf-8") as handle:
        handle.write("\n")
    return descriptor_path


def append_item_group(project_element: ET.Element) -> ET.Element:
    """Append an empty ``<ItemGroup>`` to the project root and return it."""
    return ET.SubElement(project_element, ITEM_GROUP_TAG)
