"""Composition and execution of dotnet CLI commands."""

from projgen.dotnet.commands import (
    CommandComposer,
    CommandError,
    DotNetCommand,
    UnsupportedProjectTypeError,
    execute,
)

__all__ = [
    "CommandComposer",
    "CommandError",
    "DotNetCommand",
    "UnsupportedProjectTypeError",
    "execute",
]
