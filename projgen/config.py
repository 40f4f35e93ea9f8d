"""projgen configuration.

Typed settings for the project writer.  All settings use Pydantic v2 models
so they are validated at construction time and can be serialised to/from
JSON or environment variables.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class FormatGeneration(str, Enum):
    """How NuGet packages end up in the descriptor.

    ``PACKAGE_REFERENCES`` writes ``<PackageReference>`` elements directly
    into the descriptor.  ``DOTNET_ADD_PACKAGE`` leaves the descriptor alone
    and runs ``dotnet add package`` once per package after it is saved.
    """

    PACKAGE_REFERENCES = "package-references"
    DOTNET_ADD_PACKAGE = "dotnet-add-package"


class WebPlatformConfig(BaseModel):
    """Settings for the ASP.NET Core descriptor adjustment."""

    marker_package: str = Field(
        default="Microsoft.AspNetCore.App",
        min_length=1,
        description="Package whose presence switches the project to the web SDK",
    )
    sdk: str = Field(default="Microsoft.NET.Sdk.Web", min_length=1)
    excluded_content: str = Field(
        default="*.cshtml",
        min_length=1,
        description="Glob removed from the default Content items",
    )


class Config(BaseModel):
    """Global projgen configuration.

    Created once by the CLI entry point or the test harness and passed to
    ``ProjectWriter``.
    """

    dotnet_executable: str = Field(default="dotnet", min_length=1)
    command_timeout: int = Field(default=300, ge=1, description="Per-command timeout in seconds")
    no_restore: bool = Field(default=True, description="Pass --no-restore to 'dotnet add package'")
    format_generation: FormatGeneration = Field(default=FormatGeneration.PACKAGE_REFERENCES)
    web: WebPlatformConfig = Field(default_factory=WebPlatformConfig)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path that was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            PROJGEN_DOTNET, PROJGEN_COMMAND_TIMEOUT, PROJGEN_NO_RESTORE,
            PROJGEN_FORMAT, PROJGEN_WEB_MARKER.

        Raises:
            ValueError: If a variable holds a value of the wrong form.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("PROJGEN_DOTNET"):
            kwargs["dotnet_executable"] = os.environ["PROJGEN_DOTNET"]
        if os.environ.get("PROJGEN_COMMAND_TIMEOUT"):
            raw = os.environ["PROJGEN_COMMAND_TIMEOUT"]
            try:
                kwargs["command_timeout"] = int(raw)
            except ValueError:
                raise ValueError(f"PROJGEN_COMMAND_TIMEOUT must be an integer, got {raw!r}") from None
        if os.environ.get("PROJGEN_NO_RESTORE"):
            kwargs["no_restore"] = os.environ["PROJGEN_NO_RESTORE"].strip().lower() in (
                "1", "true", "yes", "on",
            )
        if os.environ.get("PROJGEN_FORMAT"):
            raw = os.environ["PROJGEN_FORMAT"]
            try:
                kwargs["format_generation"] = FormatGeneration(raw)
            except ValueError:
                choices = ", ".join(g.value for g in FormatGeneration)
                raise ValueError(f"PROJGEN_FORMAT must be one of {choices}, got {raw!r}") from None

        web_kwargs: dict[str, Any] = {}
        if os.environ.get("PROJGEN_WEB_MARKER"):
            web_kwargs["marker_package"] = os.environ["PROJGEN_WEB_MARKER"]

        return cls(web=WebPlatformConfig(**web_kwargs), **kwargs)
