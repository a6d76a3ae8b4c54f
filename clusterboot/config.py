"""TOML-based bootstrap settings.

Loads /etc/clusterboot/defaults.toml (system) and an optional operator file,
merges them, and resolves the ``[bootstrap]`` table into a BootstrapSettings.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from clusterboot.constants import (
    CLOUD_PROVIDER,
    CONSUL_CLIENT_ADDR,
    CONSUL_CONFIG_PATH,
    CONSUL_DATA_DIR,
    IMDS_TIMEOUT_SECONDS,
    IMDS_URL,
    PROMETHEUS_RETENTION,
    SERVICE_GROUP,
    SERVICE_NAME,
    SERVICE_USER,
    SYSTEM_CONFIG_PATH,
    TAG_RETRY_ATTEMPTS,
    TAG_RETRY_DELAY_SECONDS,
    AWSTag,
)
from clusterboot.retry import RetryPolicy

type RawConfig = dict[str, Any]

SETTINGS_TABLE = "bootstrap"


@dataclass(frozen=True, slots=True)
class BootstrapSettings:
    """Ambient values for one bootstrap run.

    Args:
        tag_retry_attempts: Tag queries before giving up. Default: 30
        tag_retry_delay: Seconds between tag queries. Default: 10
        group_tag_key: Tag naming the instance's autoscaling group.
        cloud_provider: Provider name used in the retry_join directive.
        config_path: Where the membership service reads its config.
        data_dir: Membership service data directory.
        client_addr: Address the membership service binds client APIs to.
        service_user: Owner of the written config file.
        service_group: Group of the written config file.
        service_name: systemd unit restarted after the write.
        metadata_url: Base URL of the instance metadata endpoint.
        metadata_timeout: Per-request metadata timeout in seconds.
        prometheus_retention: Telemetry retention on servers.
    """

    tag_retry_attempts: int = TAG_RETRY_ATTEMPTS
    tag_retry_delay: float = TAG_RETRY_DELAY_SECONDS
    group_tag_key: str = AWSTag.AUTOSCALING_GROUP
    cloud_provider: str = CLOUD_PROVIDER
    config_path: str = CONSUL_CONFIG_PATH
    data_dir: str = CONSUL_DATA_DIR
    client_addr: str = CONSUL_CLIENT_ADDR
    service_user: str | None = SERVICE_USER
    service_group: str | None = SERVICE_GROUP
    service_name: str = SERVICE_NAME
    metadata_url: str = IMDS_URL
    metadata_timeout: float = IMDS_TIMEOUT_SECONDS
    prometheus_retention: str = PROMETHEUS_RETENTION

    def tag_retry_policy(self) -> RetryPolicy:
        return RetryPolicy(max_attempts=self.tag_retry_attempts, delay=self.tag_retry_delay)


def _deep_merge(base: RawConfig, override: RawConfig) -> RawConfig:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> RawConfig:
    if not path.is_file():
        return {}
    with path.open("rb") as f:
        return tomllib.load(f)


def load_config(
    *,
    config_path: Path | None = None,
    system_path: Path | None = None,
) -> RawConfig:
    if config_path and not config_path.is_file():
        raise FileNotFoundError(f"Config file '{config_path}' not found")

    system_cfg = _read_toml(system_path or Path(SYSTEM_CONFIG_PATH))
    operator_cfg = _read_toml(config_path) if config_path else {}

    merged = _deep_merge(system_cfg, operator_cfg)
    merged.setdefault(SETTINGS_TABLE, {})
    return merged


def _expected_types(default: object) -> tuple[type, ...]:
    match default:
        case bool():
            return (bool,)
        case int():
            return (int,)
        case float():
            return (int, float)
        case _:
            return (str,)


def _check_type(key: str, value: object, default: object) -> None:
    expected = _expected_types(default)
    # bool is an int subclass; TOML `true` is never a valid count or delay
    if isinstance(value, bool) and bool not in expected:
        expected_ok = False
    else:
        expected_ok = isinstance(value, expected)
    if not expected_ok:
        names = " or ".join(t.__name__ for t in expected)
        raise ValueError(
            f"[{SETTINGS_TABLE}] {key} must be {names}, got {type(value).__name__} {value!r}"
        )


def _build_settings(raw: RawConfig) -> BootstrapSettings:
    defaults = {f.name: f.default for f in fields(BootstrapSettings)}
    unknown = sorted(set(raw) - set(defaults))
    if unknown:
        raise ValueError(
            f"Unknown [{SETTINGS_TABLE}] keys: {', '.join(unknown)}. "
            f"Valid: {', '.join(sorted(defaults))}"
        )
    for key, value in raw.items():
        _check_type(key, value, defaults[key])
    return BootstrapSettings(**raw)


def load_settings(
    *,
    config_path: Path | None = None,
    system_path: Path | None = None,
) -> BootstrapSettings:
    config = load_config(config_path=config_path, system_path=system_path)
    return _build_settings(config[SETTINGS_TABLE])
