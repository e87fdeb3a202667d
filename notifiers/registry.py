from common.config import Config
from notifiers.base import BaseNotifier
from notifiers.telegram import TelegramNotifier
from notifiers.webhook import WebhookNotifier


def build_notifiers(config: Config) -> list[BaseNotifier]:
    return [
        TelegramNotifier(
            token=config.telegram_token,
            chat_id=config.telegram_chat_id,
            api_url=config.telegram_api_url,
        ),
        WebhookNotifier(url=config.slack_webhook),
    ]
