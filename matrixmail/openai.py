"""Chat-completion client that keeps a message history per prompt."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

import httpx

from matrixmail.errors import BotError


@dataclass
class ChatMessage:
    """One message of a conversation."""

    role: str
    content: str


@dataclass
class Prompt:
    """A named prompt and the conversation held under it."""

    prompt: str
    messages: list[ChatMessage] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Prompt:
        return cls(
            prompt=str(data["prompt"]),
            messages=[
                ChatMessage(role=str(item["role"]), content=str(item["content"]))
                for item in data["messages"]
            ],
        )

    def to_dict(self) -> dict[str, Any]:
        return {"prompt": self.prompt, "messages": [asdict(m) for m in self.messages]}


@dataclass
class OpenAIClient:
    """Client for an OpenAI-compatible chat completions endpoint."""

    protocol: str
    server: str
    api_key: str
    model: str
    temperature: float
    prompts: dict[str, Prompt] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OpenAIClient:
        return cls(
            protocol=str(data["protocol"]),
            server=str(data["server"]),
            api_key=str(data["api_key"]),
            model=str(data["model"]),
            temperature=float(data["temperature"]),
            prompts={
                str(name): Prompt.from_dict(value)
                for name, value in (data.get("prompts") or {}).items()
            },
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "protocol": self.protocol,
            "server": self.server,
            "api_key": self.api_key,
            "model": self.model,
            "temperature": self.temperature,
            "prompts": {name: prompt.to_dict() for name, prompt in self.prompts.items()},
        }

    def _prompt(self, name: str) -> Prompt:
        try:
            return self.prompts[name]
        except KeyError:
            raise LookupError("Prompt not found") from None

    async def send_message(self, name: str, message: str) -> str:
        """Append ``message`` to the prompt's history, ask the model, and return its reply."""
        prompt = self._prompt(name)
        prompt.messages.append(ChatMessage(role="user", content=message))
        payload = {
            "model": self.model,
            "messages": [asdict(m) for m in prompt.messages],
            "temperature": self.temperature,
        }
        url = f"{self.protocol}://{self.server}/v1/chat/completions"
        async with httpx.AsyncClient(timeout=None) as client:
            response = await client.post(
                url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=payload,
            )
        if not response.is_success:
            raise BotError("Request failed")
        content = str(response.json()["choices"][0]["message"]["content"])
        prompt.messages.append(ChatMessage(role="assistant", content=content))
        return content

    def clear_messages(self, name: str) -> None:
        """Forget the conversation held under the named prompt."""
        self._prompt(name).messages.clear()