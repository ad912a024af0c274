"""Webhook registration against the Bot API (install / uninstall)."""

from __future__ import annotations

import logging
import re

from wegram.webhook.models import ApiResult
from wegram.webhook.telegram import TelegramClient, TelegramTransportError

logger = logging.getLogger(__name__)

SECRET_POLICY_MESSAGE = "密钥必须至少16个字符，并且包含大写字母、小写字母和数字。"

_MIN_SECRET_LENGTH = 16
_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_DIGIT = re.compile(r"[0-9]")


def is_valid_secret(token: str) -> bool:
    """At least 16 chars with an ASCII upper, an ASCII lower and a digit."""
    return (
        len(token) >= _MIN_SECRET_LENGTH
        and _UPPER.search(token) is not None
        and _LOWER.search(token) is not None
        and _DIGIT.search(token) is not None
    )


def build_webhook_url(base_url: str, prefix: str, owner_uid: str, bot_token: str) -> str:
    return f"{base_url.rstrip('/')}/{prefix}/webhook/{owner_uid}/{bot_token}"


async def install_webhook(
    client: TelegramClient,
    base_url: str,
    owner_uid: str,
    bot_token: str,
    prefix: str,
    secret: str,
) -> ApiResult:
    """Point the bot's webhook at this deployment."""
    if not is_valid_secret(secret):
        return ApiResult(success=False, message=SECRET_POLICY_MESSAGE, status_code=400)

    webhook_url = build_webhook_url(base_url, prefix, owner_uid, bot_token)
    try:
        result = await client.set_webhook(webhook_url, secret)
    except TelegramTransportError as exc:
        logger.warning("setWebhook failed for owner %s: %s", owner_uid, exc)
        return ApiResult(
            success=False,
            message=f"安装 webhook 出错：{exc}",
            status_code=500,
        )

    if result.ok:
        logger.info("Webhook installed for owner %s", owner_uid)
        return ApiResult(success=True, message="Webhook 安装成功。")

    logger.warning("setWebhook rejected for owner %s: %s", owner_uid, result.description)
    return ApiResult(
        success=False,
        message=f"Webhook 安装失败：{result.description}",
        status_code=400,
    )


async def uninstall_webhook(client: TelegramClient, secret: str) -> ApiResult:
    """Remove the bot's webhook registration."""
    if not is_valid_secret(secret):
        return ApiResult(success=False, message=SECRET_POLICY_MESSAGE, status_code=400)

    try:
        result = await client.delete_webhook()
    except TelegramTransportError as exc:
        logger.warning("deleteWebhook failed: %s", exc)
        return ApiResult(
            success=False,
            message=f"卸载 webhook 出错：{exc}",
            status_code=500,
        )

    if result.ok:
        logger.info("Webhook uninstalled")
        return ApiResult(success=True, message="Webhook 卸载成功。")

    logger.warning("deleteWebhook rejected: %s", result.description)
    return ApiResult(
        success=False,
        message=f"Webhook 卸载失败：{result.description}",
        status_code=400,
    )
