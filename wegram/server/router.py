"""Path routing for install, uninstall and webhook delivery."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class RouteKind(str, Enum):
    INSTALL = "install"
    UNINSTALL = "uninstall"
    WEBHOOK = "webhook"


@dataclass(frozen=True)
class RouteMatch:
    kind: RouteKind
    bot_token: str
    owner_uid: str | None = None


class WebhookRouter:
    """Matches request paths under ``/<prefix>/``.

    Patterns are tried in order: install, uninstall, webhook.
    """

    def __init__(self, prefix: str) -> None:
        escaped = re.escape(prefix)
        self._patterns: tuple[tuple[RouteKind, re.Pattern[str]], ...] = (
            (
                RouteKind.INSTALL,
                re.compile(rf"^/{escaped}/install/(?P<owner_uid>[^/]+)/(?P<bot_token>[^/]+)$"),
            ),
            (
                RouteKind.UNINSTALL,
                re.compile(rf"^/{escaped}/uninstall/(?P<bot_token>[^/]+)$"),
            ),
            (
                RouteKind.WEBHOOK,
                re.compile(rf"^/{escaped}/webhook/(?P<owner_uid>[^/]+)/(?P<bot_token>[^/]+)$"),
            ),
        )

    @property
    def kinds(self) -> list[RouteKind]:
        return [kind for kind, _ in self._patterns]

    def match(self, path: str) -> RouteMatch | None:
        for kind, pattern in self._patterns:
            found = pattern.match(path)
            if found:
                groups = found.groupdict()
                return RouteMatch(
                    kind=kind,
                    bot_token=groups["bot_token"],
                    owner_uid=groups.get("owner_uid"),
                )
        return None
