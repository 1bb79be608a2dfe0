"""Binder settings: init kwargs and ``ENVBIND_*`` environment variables.

Priority chain (highest to lowest):
  1. Init kwargs, passed by the application
  2. Env vars with the ``ENVBIND_*`` prefix
  3. Code defaults

Uses Pydantic Settings v2 with the dotenv and secrets-file sources removed;
envbind never reads configuration files.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic_settings import BaseSettings, PydanticBaseSettingsSource


class MissingPolicy(StrEnum):
    """What to do when a plain (neither required nor nullable) member is unset."""

    STRICT = "strict"
    LENIENT = "lenient"


class EnvBindSettings(BaseSettings):
    """Settings shared by every bind performed through one binder.

    Attributes:
        prefix_separator: Inserted between prefix and name when building
            external keys. ``None`` concatenates without a separator.
        missing_policy: ``strict`` fails on an unset plain member;
            ``lenient`` leaves it at its default.
        load_plugins: Register parsers from ``envbind.parsers`` entry points
            when the default binder is created.
        enable_logging: Install envbind's log handler when a binder is
            created from settings (see :func:`~envbind.config.logging.configure_logging`).
        verbose: Enable DEBUG-level ``envbind`` logging.
        log_json: Use the JSON log renderer.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "ENVBIND_",
    }

    prefix_separator: str | None = "_"
    missing_policy: MissingPolicy = MissingPolicy.STRICT
    load_plugins: bool = True
    enable_logging: bool = False
    verbose: bool = False
    log_json: bool = False

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Init kwargs over environment variables; no file sources."""
        return (init_settings, env_settings)
