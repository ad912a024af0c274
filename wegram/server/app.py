"""FastAPI application exposing the relay endpoints."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.types import Receive, Scope, Send

from wegram.config import RelayConfig
from wegram.server.router import RouteKind, RouteMatch, WebhookRouter
from wegram.webhook.installer import install_webhook, uninstall_webhook
from wegram.webhook.relay import RelayEngine
from wegram.webhook.telegram import SECRET_TOKEN_HEADER, TelegramClient

logger = logging.getLogger(__name__)

NOT_FOUND = "未找到"

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    config = RelayConfig.from_env()
    logging.basicConfig(level=config.log_level, format=_LOG_FORMAT)
    # httpx logs full request URLs, which embed the bot token.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return create_app(config)


def create_app(config: RelayConfig) -> FastAPI:
    """Create the relay app for an already-loaded configuration."""
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
    router = WebhookRouter(config.prefix)

    if not config.delivery_enabled:
        logger.warning(
            "SECRET_TOKEN is empty: webhook deliveries will be rejected until it is set",
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    async def dispatch(request: Request) -> Response:
        match = router.match(_raw_path(request))
        if match is None:
            return PlainTextResponse(NOT_FOUND, status_code=404)

        client = TelegramClient(match.bot_token, api_base=config.api_base)
        if match.kind is RouteKind.WEBHOOK:
            return await _deliver(request, match, client, config)
        if match.kind is RouteKind.INSTALL:
            result = await install_webhook(
                client,
                _base_url(request),
                match.owner_uid or "",
                match.bot_token,
                config.prefix,
                config.secret_token,
            )
        else:
            result = await uninstall_webhook(client, config.secret_token)
        return JSONResponse(result.body(), status_code=result.status_code)

    app.add_route("/{path:path}", PathDispatcher(dispatch))
    return app


class PathDispatcher:
    """ASGI endpoint that accepts every HTTP method and routes by path alone.

    Starlette limits plain function endpoints to GET; an ASGI callable has no
    method list.
    """

    def __init__(self, handler: Callable[[Request], Awaitable[Response]]) -> None:
        self._handler = handler

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        response = await self._handler(request)
        await response(scope, receive, send)


async def _deliver(
    request: Request,
    match: RouteMatch,
    client: TelegramClient,
    config: RelayConfig,
) -> Response:
    engine = RelayEngine(client, match.owner_uid or "")
    body = await request.body()
    response = await engine.deliver(
        request.headers.get(SECRET_TOKEN_HEADER),
        body,
        config.secret_token,
    )
    return PlainTextResponse(response.text, status_code=response.status_code)


def _raw_path(request: Request) -> str:
    """Request path as received, percent-escapes intact."""
    raw = request.scope.get("raw_path")
    if not raw:
        return request.url.path
    return raw.split(b"?", 1)[0].decode("latin-1")


def _base_url(request: Request) -> str:
    """Scheme and hostname of the inbound request, without port."""
    return f"{request.url.scheme}://{request.url.hostname}"
