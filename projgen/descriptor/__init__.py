"""Descriptor (``*.csproj`` / ``*.fsproj`` / ``*.vbproj``) editing."""

from projgen.descriptor.builder import (
    append_file_group,
    append_package_group,
    append_reference_group,
    write_item_groups,
)
from projgen.descriptor.document import DescriptorShapeError, load_descriptor, save_descriptor
from projgen.descriptor.platform import WebPlatformAdjustment, set_target_frameworks

__all__ = [
    "DescriptorShapeError",
    "WebPlatformAdjustment",
    "append_file_group",
    "append_package_group",
    "append_reference_group",
    "load_descriptor",
    "save_descriptor",
    "set_target_frameworks",
    "write_item_groups",
]
