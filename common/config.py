import json
import os
from dataclasses import dataclass, field
from typing import Any, Mapping

from dotenv import load_dotenv

from common.assets import DEFAULT_ASSETS, TrackedAsset, build_assets, parse_assets
from common.errors import ConfigError

COINGECKO_API_URL = "https://api.coingecko.com/api/v3"
TELEGRAM_API_URL = "https://api.telegram.org"

CONFIG_SOURCES = ("env", "file")


@dataclass(frozen=True)
class Config:
    telegram_token: str = ""
    telegram_chat_id: str = ""
    slack_webhook: str = ""

    assets: tuple[TrackedAsset, ...] = field(default=DEFAULT_ASSETS)
    db_path: str = "data.db"
    fetch_interval_sec: float = 600
    show_price_changes: bool = True

    price_api_url: str = COINGECKO_API_URL
    telegram_api_url: str = TELEGRAM_API_URL

    log_level: str = "INFO"
    log_dir: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Config":
        env = os.environ if environ is None else environ
        return cls(
            telegram_token=env.get("TELEGRAM_BOT_TOKEN", ""),
            telegram_chat_id=env.get("TELEGRAM_CHAT_ID", ""),
            slack_webhook=env.get("SLACK_WEBHOOK", ""),
            **_common_settings(env, {}),
        )

    @classmethod
    def from_file(cls, path: str, environ: Mapping[str, str] | None = None) -> "Config":
        env = os.environ if environ is None else environ
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except OSError as exc:
            raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
        except ValueError as exc:
            raise ConfigError(f"Config file {path} is not valid JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object")

        return cls(
            telegram_token=_as_str(data.get("telegram_token")),
            telegram_chat_id=_as_str(data.get("telegram_chat_id")),
            slack_webhook=_as_str(data.get("slack_webhook")),
            **_common_settings(env, data),
        )


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """
    Builds the process config with the strategy chosen by CONFIG_SOURCE.

    "env" reads credentials from environment variables, "file" reads them
    from the JSON file at CONFIG_FILE.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    source = environ.get("CONFIG_SOURCE", "env").strip().lower()
    if source == "env":
        return Config.from_env(environ)
    if source == "file":
        return Config.from_file(environ.get("CONFIG_FILE", "config.json"), environ)
    raise ConfigError(f"CONFIG_SOURCE must be one of {CONFIG_SOURCES}, got {source!r}")


def _common_settings(env: Mapping[str, str], data: Mapping[str, Any]) -> dict[str, Any]:
    settings: dict[str, Any] = {}

    if "assets" in data:
        settings["assets"] = _assets_from_json(data["assets"])
    elif env.get("TRACKED_ASSETS"):
        settings["assets"] = parse_assets(env["TRACKED_ASSETS"])

    db_path = data.get("db_path") or env.get("DB_PATH")
    if db_path:
        settings["db_path"] = str(db_path)

    interval = data.get("fetch_interval_sec", env.get("FETCH_INTERVAL_SEC"))
    if interval is not None:
        settings["fetch_interval_sec"] = _positive_number(interval, "fetch_interval_sec")

    if env.get("SHOW_PRICE_CHANGES"):
        settings["show_price_changes"] = _as_bool(env["SHOW_PRICE_CHANGES"])

    if env.get("PRICE_API_URL"):
        settings["price_api_url"] = env["PRICE_API_URL"].rstrip("/")
    if env.get("TELEGRAM_API_URL"):
        settings["telegram_api_url"] = env["TELEGRAM_API_URL"].rstrip("/")

    settings["log_level"] = env.get("LOG_LEVEL", "INFO")
    settings["log_dir"] = env.get("LOG_DIR") or None
    return settings


def _assets_from_json(raw: Any) -> tuple[TrackedAsset, ...]:
    if not isinstance(raw, list):
        raise ConfigError("'assets' must be a list")

    entries = []
    for item in raw:
        if isinstance(item, str):
            entries.append((item, ""))
        elif isinstance(item, dict):
            entries.append((item.get("id"), item.get("symbol", "")))
        else:
            raise ConfigError(f"Invalid asset entry: {item!r}")
    return build_assets(entries)


def _positive_number(value: Any, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc
    if number <= 0:
        raise ConfigError(f"{name} must be positive, got {value!r}")
    return number


def _as_bool(value: str) -> bool:
    return value.strip().lower() not in ("0", "false", "no", "off")


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)
