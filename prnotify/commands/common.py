"""Shared helpers for CLI command modules."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import yaml

from prnotify.config import PrnotifyConfig, load_effective_config
from prnotify.connectors.base import ActivitySource, NotificationSink
from prnotify.services.command_runtime import CommandRuntime

logger = logging.getLogger(__name__)

ALIAS_TO_CANONICAL = {
    "notify": "run",
    "show-snapshot": "snapshot",
}


def normalize_command(name: str) -> str:
    return ALIAS_TO_CANONICAL.get(name, name)


def load_yaml_dict(path: str | None) -> dict | None:
    if not path:
        return None
    data = yaml.safe_load(Path(path).read_text())
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValueError(f"YAML at {path} must decode to a mapping")
    return data


def load_config(args: argparse.Namespace) -> PrnotifyConfig:
    return load_effective_config(
        config_path=args.config,
        runtime_override=load_yaml_dict(args.runtime_override),
    )


def add_common_config_flags(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("--config", help="Config YAML (default: $XDG_CONFIG_HOME/prnotify/prnotify.yaml)")
    cmd.add_argument("--runtime-override", help="Optional runtime override YAML")


def build_source(config: PrnotifyConfig, *, runtime: CommandRuntime) -> ActivitySource:
    cookie = None
    if config.firefox is not None:
        cookie = runtime.cookie_extractor(config.firefox.cookies_file_path, config.github.hostname)
        logger.debug("Using Firefox session cookies for %s", config.github.hostname)
    return runtime.source_connector_cls(
        hostname=config.github.hostname,
        gh_bin=config.github.gh_bin,
        token=config.github.personal_access_token,
        cookie=cookie,
    )


def build_sink(config: PrnotifyConfig, *, runtime: CommandRuntime, dry_run: bool = False) -> NotificationSink:
    return runtime.sink_connector_cls(
        base_url=config.ntfy.base_url,
        topic=config.ntfy.topic,
        timeout_seconds=config.ntfy.timeout_seconds,
        dry_run=dry_run,
    )
