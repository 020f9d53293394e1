"""Configuration models and loading for prnotify."""

from __future__ import annotations

import os
import re
from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    EnvSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from prnotify.errors import FailurePolicy

ENV_PREFIX = "PRNOTIFY_"
ENV_NESTED_DELIMITER = "__"
CONFIG_FILENAME = "prnotify.yaml"
DEFAULT_QUERY = "is:open is:pr involves:@me"


def _user_dir(env_key: str, fallback: str) -> Path:
    raw = os.environ.get(env_key)
    if raw:
        return Path(raw)
    return Path.home() / fallback


def default_config_path() -> Path:
    return _user_dir("XDG_CONFIG_HOME", ".config") / "prnotify" / CONFIG_FILENAME


def default_cache_path() -> str:
    return str(_user_dir("XDG_CACHE_HOME", ".cache") / "prnotify" / "cache.json")


def _expand_path(value: str) -> str:
    return os.path.expandvars(os.path.expanduser(value))


class GithubConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    hostname: str = "github.com"
    username: str
    personal_access_token: str | None = None
    queries: list[str] = Field(default_factory=lambda: [DEFAULT_QUERY])
    exclude_patterns: list[str] = Field(default_factory=list)
    gh_bin: str = "gh"

    @field_validator("queries", "exclude_patterns", mode="before")
    @classmethod
    def _single_value_as_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("exclude_patterns")
    @classmethod
    def _patterns_compile(cls, value: list[str]) -> list[str]:
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"Invalid exclude pattern {pattern!r}: {exc}") from exc
        return value

    @field_validator("queries")
    @classmethod
    def _queries_not_empty(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("github.queries must contain at least one search query")
        return value


class NtfyConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    base_url: str = "https://ntfy.sh"
    topic: str
    timeout_seconds: float = 10.0


class CacheConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str = Field(default_factory=default_cache_path)

    @field_validator("path")
    @classmethod
    def _expand(cls, value: str) -> str:
        return _expand_path(value)


class FirefoxConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    cookies_file_path: str

    @field_validator("cookies_file_path")
    @classmethod
    def _expand(cls, value: str) -> str:
        return _expand_path(value)


class RunConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    failure_policy: FailurePolicy = FailurePolicy.ABORT_RUN


class _YamlFileSource(YamlConfigSettingsSource):
    def _read_file(self, file_path: Path) -> dict[str, Any]:
        data = super()._read_file(file_path)
        if not isinstance(data, dict):
            raise ValueError(f"YAML at {file_path} must decode to a mapping")
        return data


class _EnvSource(EnvSettingsSource):
    """Environment source that hands non-JSON values for list settings to the models."""

    def decode_complex_value(self, field_name: str, field: FieldInfo, value: Any) -> Any:
        try:
            return super().decode_complex_value(field_name, field, value)
        except ValueError:
            return value


_config_file: ContextVar[Path | None] = ContextVar("prnotify_config_file", default=None)


class PrnotifyConfig(BaseSettings):
    """Effective settings: init kwargs > ``PRNOTIFY_<SECTION>__<KEY>`` env > YAML file."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter=ENV_NESTED_DELIMITER,
        case_sensitive=False,
        extra="forbid",
    )

    github: GithubConfig
    ntfy: NtfyConfig
    cache: CacheConfig = Field(default_factory=CacheConfig)
    firefox: FirefoxConfig | None = None
    run: RunConfig = Field(default_factory=RunConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            _EnvSource(settings_cls),
            _YamlFileSource(settings_cls, yaml_file=_config_file.get()),
        )


def load_effective_config(
    config_path: str | Path | None = None,
    runtime_override: dict[str, Any] | None = None,
) -> PrnotifyConfig:
    """Load config with precedence runtime > environment > YAML file > defaults."""
    path = Path(config_path) if config_path else default_config_path()
    token = _config_file.set(path)
    try:
        return PrnotifyConfig(**(runtime_override or {}))
    finally:
        _config_file.reset(token)
