"""Platform-specific edits to a scaffolded descriptor."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Sequence

from projgen.config import WebPlatformConfig
from projgen.descriptor.document import (
    PROPERTY_GROUP_TAG,
    DescriptorShapeError,
    append_item_group,
)
from projgen.models import Project

TARGET_FRAMEWORK_TAG = "TargetFramework"
TARGET_FRAMEWORKS_TAG = "TargetFrameworks"


class WebPlatformAdjustment:
    """Switches a descriptor to the web SDK when the marker package is used.

    The adjustment appends an item group, so applying it twice would
    duplicate that group.  Each instance can therefore be applied only
    once; create a new one per descriptor.
    """

    def __init__(self, marker_package: str, sdk: str, excluded_content: str) -> None:
        self.marker_package = marker_package
        self.sdk = sdk
        self.excluded_content = excluded_content
        self._applied = False

    @classmethod
    def from_config(cls, config: WebPlatformConfig) -> "WebPlatformAdjustment":
        return cls(config.marker_package, config.sdk, config.excluded_content)

    @property
    def applied(self) -> bool:
        return self._applied

    def matches(self, project: Project) -> bool:
        """Return ``True`` if the project depends on the marker package."""
        return any(p.name == self.marker_package for p in project.nuget_packages)

    def apply(self, project: Project, project_element: ET.Element) -> bool:
        """Adjust the descriptor if the project depends on the marker package.

        Returns:
            ``True`` if the descriptor was changed.

        Raises:
            RuntimeError: If this adjustment was already applied.
            DescriptorShapeError: If the root has no ``Sdk`` attribute.
        """
        if self._applied:
            raise RuntimeError("WebPlatformAdjustment can only be applied once")
        self._applied = True

        if not self.matches(project):
            return False

        if "Sdk" not in project_element.attrib:
            raise DescriptorShapeError("Project root has no 'Sdk' attribute")
        project_element.set("Sdk", self.sdk)

        group = append_item_group(project_element)
        ET.SubElement(group, "Content", {"Remove": self.excluded_content})
        return True


def set_target_frameworks(project_element: ET.Element, frameworks: Sequence[str]) -> ET.Element:
    """Replace ``<TargetFramework>`` with a ``<TargetFrameworks>`` moniker.

    The new element takes the old one's position in its property group and
    its text is ``frameworks`` joined by ``;`` as given.

    Raises:
        DescriptorShapeError: Unless exactly one ``PropertyGroup/TargetFramework``
            exists.
    """
    matches = [
        (group, element)
        for group in project_element.findall(PROPERTY_GROUP_TAG)
        for element in group.findall(TARGET_FRAMEWORK_TAG)
    ]
    if len(matches) != 1:
        raise DescriptorShapeError(
            f"Expected exactly one {PROPERTY_GROUP_TAG}/{TARGET_FRAMEWORK_TAG} "
            f"element, found {len(matches)}"
        )

    group, old = matches[0]
    index = list(group).index(old)
    replacement = ET.Element(TARGET_FRAMEWORKS_TAG)
    replacement.text = ";".join(frameworks)
    replacement.tail = old.tail
    group.remove(old)
    group.insert(index, replacement)
    return replacement
