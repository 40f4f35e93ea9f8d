"""Unit tests for Config and related Pydantic models (projgen.config).

Tests cover:
- Config and WebPlatformConfig defaults and validation
- save/load round trip
- from_env
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from projgen.config import Config, FormatGeneration, WebPlatformConfig


class TestWebPlatformConfig:
    @pytest.mark.unit
    def test_defaults(self):
        web = WebPlatformConfig()
        assert web.marker_package == "Microsoft.AspNetCore.App"
        assert web.sdk == "Microsoft.NET.Sdk.Web"
        assert web.excluded_content == "*.cshtml"

    @pytest.mark.unit
    def test_empty_marker_rejected(self):
        with pytest.raises(ValidationError):
            WebPlatformConfig(marker_package="")


class TestConfig:
    @pytest.mark.unit
    def test_defaults(self):
        config = Config()
        assert config.dotnet_executable == "dotnet"
        assert config.command_timeout == 300
        assert config.no_restore is True
        assert config.format_generation is FormatGeneration.PACKAGE_REFERENCES
        assert isinstance(config.web, WebPlatformConfig)

    @pytest.mark.unit
    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            Config(command_timeout=0)

    @pytest.mark.unit
    def test_format_from_string(self):
        config = Config(format_generation="dotnet-add-package")
        assert config.format_generation is FormatGeneration.DOTNET_ADD_PACKAGE

    @pytest.mark.unit
    def test_save_and_load(self, tmp_path: Path):
        config = Config(
            dotnet_executable="/opt/dotnet/dotnet",
            format_generation=FormatGeneration.DOTNET_ADD_PACKAGE,
            web=WebPlatformConfig(marker_package="My.Web.Marker"),
        )
        path = config.save(tmp_path / "nested" / "projgen.json")
        assert path.exists()

        loaded = Config.load(path)
        assert loaded == config


class TestConfigFromEnv:
    @pytest.mark.unit
    def test_no_variables_gives_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            assert Config.from_env() == Config()

    @pytest.mark.unit
    def test_all_variables(self):
        env = {
            "PROJGEN_DOTNET": "/usr/share/dotnet/dotnet",
            "PROJGEN_COMMAND_TIMEOUT": "45",
            "PROJGEN_NO_RESTORE": "false",
            "PROJGEN_FORMAT": "dotnet-add-package",
            "PROJGEN_WEB_MARKER": "Microsoft.AspNetCore.All",
        }
        with patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        assert config.dotnet_executable == "/usr/share/dotnet/dotnet"
        assert config.command_timeout == 45
        assert config.no_restore is False
        assert config.format_generation is FormatGeneration.DOTNET_ADD_PACKAGE
        assert config.web.marker_package == "Microsoft.AspNetCore.All"
        assert config.web.sdk == "Microsoft.NET.Sdk.Web"

    @pytest.mark.unit
    def test_invalid_format_raises(self):
        with patch.dict(os.environ, {"PROJGEN_FORMAT": "legacy"}, clear=True):
            with pytest.raises(ValueError):
                Config.from_env()

    @pytest.mark.unit
    def test_invalid_format_names_variable(self):
        with patch.dict(os.environ, {"PROJGEN_FORMAT": "legacy"}, clear=True):
            with pytest.raises(ValueError, match="PROJGEN_FORMAT must be one of"):
                Config.from_env()

    @pytest.mark.unit
    def test_non_integer_timeout_names_variable(self):
        with patch.dict(os.environ, {"PROJGEN_COMMAND_TIMEOUT": "abc"}, clear=True):
            with pytest.raises(ValueError, match="PROJGEN_COMMAND_TIMEOUT must be an integer"):
                Config.from_env()

    @pytest.mark.unit
    def test_zero_timeout_is_validation_error(self):
        with patch.dict(os.environ, {"PROJGEN_COMMAND_TIMEOUT": "0"}, clear=True):
            with pytest.raises(ValidationError):
                Config.from_env()
