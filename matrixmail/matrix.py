"""Minimal Matrix client-server API client."""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass
from typing import Any
from urllib.parse import quote

import httpx
import markdown as _markdown

log = logging.getLogger(__name__)


@dataclass
class MatrixClient:
    """Posts messages to two rooms and follows the sync stream."""

    protocol: str
    server: str
    token: str
    email_room: str
    chat_room: str
    sender: str
    timeout: int
    since: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MatrixClient:
        since = data.get("since")
        return cls(
            protocol=str(data["protocol"]),
            server=str(data["server"]),
            token=str(data["token"]),
            email_room=str(data["email_room"]),
            chat_room=str(data["chat_room"]),
            sender=str(data["sender"]),
            timeout=int(data["timeout"]),
            since=None if since is None else str(since),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def _headers(self) -> dict[str, str]:
        return {
            "Content-type": "application/json",
            "Authorization": f"Bearer {self.token}",
        }

    async def sync(self) -> dict[str, Any] | None:
        """Fetch new events; return the response if it carries a new batch token."""
        url = f"{self.protocol}://{self.server}/_matrix/client/v3/sync"
        params: dict[str, Any] = {"timeout": self.timeout}
        if self.since is not None:
            params["since"] = self.since
        log.debug("sync %s %s", url, params)
        async with httpx.AsyncClient(headers=self._headers(), timeout=None) as client:
            response = await client.get(url, params=params)
        data = response.json()
        next_batch = data.get("next_batch") if isinstance(data, dict) else None
        if isinstance(next_batch, str) and next_batch != self.since:
            self.since = next_batch
            return data
        return None

    async def post_to_chat_room(self, message: str) -> str:
        return await self.post(self.chat_room, message)

    async def post_to_email_room(self, message: str) -> str:
        return await self.post(self.email_room, message)

    async def post(self, room: str, markdown: str) -> str:
        """Send ``markdown`` to ``room`` as text with an HTML rendering; return the reply body."""
        url = (
            f"{self.protocol}://{self.server}/_matrix/client/v3/rooms/"
            f"{quote(room, safe='')}:{self.server}/send/m.room.message/{time.time()}"
        )
        body = {
            "msgtype": "m.text",
            "body": markdown,
            "format": "org.matrix.custom.html",
            "formatted_body": _markdown.markdown(markdown),
        }
        log.debug("post %s %s", url, body)
        async with httpx.AsyncClient(headers=self._headers(), timeout=None) as client:
            response = await client.put(url, json=body)
        return response.text

    def sender_id(self) -> str:
        return f"@{self.sender}:{self.server}"