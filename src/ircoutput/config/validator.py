"""Adapter configuration: flat host map -> AdapterConfig."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from loguru import logger

from ircoutput.errors import InvalidFieldFormat, MissingRequiredField

DEFAULT_NICKNAME = "graylog2"

# Raw keys as the host configuration UI submits them
KEY_HOSTNAME = "hostname"
KEY_PORT = "port"
KEY_PASSWORD = "password"
KEY_NICKNAME = "nickname"
KEY_WEB_HOSTNAME = "webinterfaceHostname"


@dataclass(frozen=True)
class AdapterConfig:
    """Validated adapter configuration."""

    hostname: str
    port: int | None = None
    password: str | None = None
    nickname: str = DEFAULT_NICKNAME
    web_link_hostname: str | None = None


def config_set(raw: Mapping[str, str] | None, key: str) -> bool:
    """True when key is present with a non-empty value."""
    if raw is None or key not in raw:
        return False
    value = raw[key]
    return value is not None and value != ""


def validate_config(raw: Mapping[str, str] | None) -> AdapterConfig:
    """Validate the host map. Raise MissingRequiredField / InvalidFieldFormat."""
    raw = raw or {}
    if not config_set(raw, KEY_HOSTNAME):
        raise MissingRequiredField(
            "Missing hostname",
            code="missing_hostname",
            details={"field": KEY_HOSTNAME},
        )
    hostname = str(raw[KEY_HOSTNAME])

    port: int | None = None
    if config_set(raw, KEY_PORT):
        value = raw[KEY_PORT]
        try:
            port = int(str(value).strip())
        except ValueError as exc:
            raise InvalidFieldFormat(
                "Invalid port",
                code="invalid_port",
                details={"field": KEY_PORT, "value": value},
                original_error=exc,
            ) from exc
        if not 0 < port < 65536:
            raise InvalidFieldFormat(
                "Invalid port",
                code="invalid_port",
                details={"field": KEY_PORT, "value": value},
            )

    password = str(raw[KEY_PASSWORD]) if config_set(raw, KEY_PASSWORD) else None
    nickname = str(raw[KEY_NICKNAME]) if config_set(raw, KEY_NICKNAME) else DEFAULT_NICKNAME
    web_link_hostname = str(raw[KEY_WEB_HOSTNAME]) if config_set(raw, KEY_WEB_HOSTNAME) else None

    config = AdapterConfig(
        hostname=hostname,
        port=port,
        password=password,
        nickname=nickname,
        web_link_hostname=web_link_hostname,
    )
    logger.debug(
        "Adapter config accepted: {}:{} as {}{}",
        config.hostname,
        config.port or "default",
        config.nickname,
        f", links via {config.web_link_hostname}" if config.web_link_hostname else "",
    )
    return config
