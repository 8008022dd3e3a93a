import os
from dataclasses import dataclass
from typing import Any, Dict, Tuple

import yaml

CONFIG_ENV_KEY = "CONFIG_PATH"
DEFAULT_CONFIG_PATH = "config.yml"
DEFAULT_EVENT_FEED_CHANNEL_ID = 1151219763549327471

# Secret names used by the hosted deployment; they override the file.
ENV_OVERRIDES = {
    "token": "DISCORD_TOKEN",
    "steam_api_key": "STEAM_API_KEY",
    "owner_guild_id": "OWNER_GUILD_ID",
    "servers": "ARMA_SERVERS",
}


class ConfigurationError(ValueError):
    pass


@dataclass(frozen=True)
class BotConfig:
    token: str
    steam_api_key: str
    owner_guild_id: int
    servers: Tuple[str, ...]
    event_feed_channel_id: int = DEFAULT_EVENT_FEED_CHANNEL_ID
    log_level: str = "INFO"


def _read_file(config_path: str, required: bool) -> Dict[str, Any]:
    if not os.path.exists(config_path):
        if required:
            raise ConfigurationError(f"Config file '{config_path}' not found")
        return {}
    with open(config_path, "r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in '{config_path}': {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config '{config_path}' must be a mapping")
    return data


def _parse_int(key: str, value: Any) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Config '{key}' must be an integer, got {value!r}"
        ) from None


def parse_servers(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        entries = [part.strip() for part in value.split(",")]
    elif isinstance(value, (list, tuple)):
        entries = [str(part).strip() for part in value]
    else:
        raise ConfigurationError("Config 'servers' must be a list or comma-separated string")
    servers = tuple(entry for entry in entries if entry)
    if not servers:
        raise ConfigurationError("Config missing 'servers'")
    for server in servers:
        host, sep, port = server.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ConfigurationError(
                f"Server address '{server}' must be in host:port form"
            )
    return servers


def load_config(
    path: str | None = None, environ: Dict[str, str] | None = None
) -> BotConfig:
    env = os.environ if environ is None else environ
    config_path = path or env.get(CONFIG_ENV_KEY, DEFAULT_CONFIG_PATH)
    data = _read_file(config_path, required=path is not None)
    for key, env_key in ENV_OVERRIDES.items():
        if env.get(env_key):
            data[key] = env[env_key]

    token = str(data.get("token") or "").strip()
    if not token:
        raise ConfigurationError("Config missing 'token'")

    steam_api_key = str(data.get("steam_api_key") or "").strip()
    if not steam_api_key:
        raise ConfigurationError("Config missing 'steam_api_key'")

    if data.get("owner_guild_id") in (None, ""):
        raise ConfigurationError("Config missing 'owner_guild_id'")
    owner_guild_id = _parse_int("owner_guild_id", data["owner_guild_id"])

    if data.get("servers") in (None, ""):
        raise ConfigurationError("Config missing 'servers'")
    servers = parse_servers(data["servers"])

    event_feed_channel_id = _parse_int(
        "event_feed_channel_id",
        data.get("event_feed_channel_id") or DEFAULT_EVENT_FEED_CHANNEL_ID,
    )

    log_level = str(data.get("log_level") or "INFO").upper()
    valid_levels = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
    if log_level not in valid_levels:
        raise ConfigurationError(
            f"Invalid log_level '{log_level}'. Must be one of {sorted(valid_levels)}"
        )

    return BotConfig(
        token=token,
        steam_api_key=steam_api_key,
        owner_guild_id=owner_guild_id,
        servers=servers,
        event_feed_channel_id=event_feed_channel_id,
        log_level=log_level,
    )
