"""
Snapshot configuration.

Loaded from `snapmatch.yaml`:

    action: verify            # verify | overwrite | skip | ignore
    unordered: false
    normalize_paths: true
    normalize_newlines: true
    redactions:
      "[ROOT]": /tmp/sandbox
      "[EXE]": ""

Rules:
- Missing file: defaults
- Unknown keys: logged and ignored
- Invalid values: ConfigError
- `SNAPSHOTS` environment variable overrides `action`
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from snapmatch.domain.constants import ACTION_VERIFY, ACTIONS, DEFAULT_CONFIG_FILENAME, SNAPSHOTS_ENV
from snapmatch.domain.errors import ConfigError, ErrorCodes, SnapshotError

logger = logging.getLogger(__name__)

_BOOL_KEYS = ("unordered", "normalize_paths", "normalize_newlines")
_KNOWN_KEYS = {"action", "redactions", *_BOOL_KEYS}


@dataclass
class SnapshotConfig:
    """Settings shared by every comparison in a test run."""
    action: str = ACTION_VERIFY
    unordered: bool = False
    normalize_paths: bool = True
    normalize_newlines: bool = True
    redactions: dict[str, str] = field(default_factory=dict)
    source: Path | None = None

    def build_redactions(self):
        """
        Registry with `[EXE]` plus every configured binding.

        Raises:
            ConfigError: If a configured placeholder is malformed
        """
        from snapmatch.golden.redactions import Redactions

        redactions = Redactions.with_exe()
        for placeholder, value in self.redactions.items():
            try:
                redactions.insert(placeholder, value)
            except SnapshotError as e:
                raise ConfigError(
                    ErrorCodes.CONFIG_INVALID,
                    path=str(self.source) if self.source else None,
                    key="redactions",
                    placeholder=placeholder,
                    reason=e.code,
                ) from e
        return redactions


def resolve_action(action: str | None = None) -> str:
    """
    Pick the snapshot action: `SNAPSHOTS` env var, then `action`, then verify.

    Raises:
        ConfigError: If the chosen value is not a known action
    """
    env_value = os.getenv(SNAPSHOTS_ENV)
    if env_value:
        chosen, origin = env_value.strip().lower(), SNAPSHOTS_ENV
    elif action:
        chosen, origin = action, "action"
    else:
        return ACTION_VERIFY

    if chosen not in ACTIONS:
        raise ConfigError(ErrorCodes.CONFIG_INVALID, key=origin, value=chosen, allowed=list(ACTIONS))
    return chosen


def load_config(config_path: Path | None = None) -> SnapshotConfig:
    """
    Load snapshot settings.

    Args:
        config_path: YAML file; None looks for `snapmatch.yaml` in the
            working directory

    Returns:
        SnapshotConfig with the environment override applied

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values
    """
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_FILENAME
    config_path = Path(config_path)

    if not config_path.exists():
        logger.debug(f"No config at {config_path}, using defaults")
        return SnapshotConfig(action=resolve_action())

    try:
        with open(config_path, encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(ErrorCodes.CONFIG_UNREADABLE, path=str(config_path), reason=str(e)) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(
            ErrorCodes.CONFIG_INVALID,
            path=str(config_path),
            reason=f"expected a mapping, got {type(data).__name__}",
        )

    unknown = sorted(str(k) for k in data if k not in _KNOWN_KEYS)
    if unknown:
        logger.warning(f"Ignoring unknown config keys in {config_path}: {', '.join(unknown)}")

    config = SnapshotConfig(source=config_path)

    for key in _BOOL_KEYS:
        if key in data:
            value = data[key]
            if not isinstance(value, bool):
                raise ConfigError(ErrorCodes.CONFIG_INVALID, path=str(config_path), key=key, value=value)
            setattr(config, key, value)

    action = data.get("action")
    if action is not None and not isinstance(action, str):
        raise ConfigError(ErrorCodes.CONFIG_INVALID, path=str(config_path), key="action", value=action)
    config.action = resolve_action(action)

    redactions = data.get("redactions") or {}
    if not isinstance(redactions, dict):
        raise ConfigError(ErrorCodes.CONFIG_INVALID, path=str(config_path), key="redactions", value=redactions)
    for placeholder, value in redactions.items():
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise ConfigError(
                ErrorCodes.CONFIG_INVALID,
                path=str(config_path),
                key="redactions",
                placeholder=placeholder,
                value=value,
            )
        config.redactions[str(placeholder)] = value

    logger.info(f"Loaded snapshot config from {config_path} (action={config.action})")
    return config
