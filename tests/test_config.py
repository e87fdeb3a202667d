import json

import pytest

from common.assets import DEFAULT_ASSETS, TrackedAsset, parse_assets
from common.config import COINGECKO_API_URL, Config, load_config
from common.errors import ConfigError


def test_env_defaults():
    config = Config.from_env({})

    assert config.telegram_token == ""
    assert config.slack_webhook == ""
    assert config.assets == DEFAULT_ASSETS
    assert config.db_path == "data.db"
    assert config.fetch_interval_sec == 600
    assert config.show_price_changes is True
    assert config.price_api_url == COINGECKO_API_URL


def test_env_values():
    config = Config.from_env(
        {
            "TELEGRAM_BOT_TOKEN": "token",
            "TELEGRAM_CHAT_ID": "42",
            "SLACK_WEBHOOK": "https://hooks.example/x",
            "TRACKED_ASSETS": "solana:SOL, bitcoin",
            "DB_PATH": "/tmp/prices.db",
            "FETCH_INTERVAL_SEC": "30",
            "SHOW_PRICE_CHANGES": "false",
            "PRICE_API_URL": "http://localhost:9000/",
        }
    )

    assert config.telegram_token == "token"
    assert config.telegram_chat_id == "42"
    assert config.slack_webhook == "https://hooks.example/x"
    assert config.assets == (TrackedAsset("solana", "SOL"), TrackedAsset("bitcoin", "BITCOIN"))
    assert config.db_path == "/tmp/prices.db"
    assert config.fetch_interval_sec == 30.0
    assert config.show_price_changes is False
    assert config.price_api_url == "http://localhost:9000"


@pytest.mark.parametrize("interval", ["0", "-5", "soon"])
def test_invalid_interval(interval):
    with pytest.raises(ConfigError):
        Config.from_env({"FETCH_INTERVAL_SEC": interval})


@pytest.mark.parametrize("raw", ["bitcoin,bitcoin:BTC", " , ", ":BTC"])
def test_invalid_asset_table(raw):
    with pytest.raises(ConfigError):
        parse_assets(raw)


def test_config_is_immutable():
    config = Config.from_env({})

    with pytest.raises(AttributeError):
        config.telegram_token = "changed"


def test_from_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "telegram_token": "token",
                "telegram_chat_id": 42,
                "slack_webhook": "https://hooks.example/x",
                "assets": [{"id": "ethereum", "symbol": "ETH"}, "solana"],
                "fetch_interval_sec": 120,
            }
        )
    )

    config = Config.from_file(str(path), environ={})

    assert config.telegram_token == "token"
    assert config.telegram_chat_id == "42"
    assert config.slack_webhook == "https://hooks.example/x"
    assert config.assets == (TrackedAsset("ethereum", "ETH"), TrackedAsset("solana", "SOLANA"))
    assert config.fetch_interval_sec == 120


def test_from_file_missing(tmp_path):
    with pytest.raises(ConfigError, match="Cannot read"):
        Config.from_file(str(tmp_path / "missing.json"), environ={})


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_from_file_invalid(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content)

    with pytest.raises(ConfigError):
        Config.from_file(str(path), environ={})


def test_load_config_selects_strategy(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"telegram_token": "from-file"}))

    from_file = load_config(
        {"CONFIG_SOURCE": "file", "CONFIG_FILE": str(path), "TELEGRAM_BOT_TOKEN": "from-env"}
    )
    from_env = load_config({"TELEGRAM_BOT_TOKEN": "from-env"})

    assert from_file.telegram_token == "from-file"
    assert from_env.telegram_token == "from-env"


def test_load_config_unknown_source():
    with pytest.raises(ConfigError):
        load_config({"CONFIG_SOURCE": "vault"})
