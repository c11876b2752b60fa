"""Chat commands understood by the bot."""

from __future__ import annotations

import time
from collections.abc import Iterable

import httpx

from matrixmail.errors import BotError
from matrixmail.openai import OpenAIClient

WEATHER_URL = "https://wttr.in/silla"
HISTORY_PROMPT = "historia"

_OPENAI_ERRORS = (LookupError, BotError, httpx.HTTPError, ValueError, TypeError)


def _strip_prefix(text: str, prefix: str) -> str:
    """Remove every leading repetition of ``prefix`` from ``text``."""
    while prefix and text.startswith(prefix):
        text = text[len(prefix):]
    return text


def help_text(names: Iterable[str]) -> str:
    """Return the help message listing the commands and the prompts they reach."""
    lines = [
        "**Comandos disponibles**:",
        "- !? - Muestra esta ayuda",
        "- !c <prompt> - Limpia el historial de mensajes del <prompt>",
        "- !h - Hora actual",
        "- !t - Tiempo en Silla",
    ]
    lines.extend(f"- !{name[0]} <pregunta> - Consulta al prompt `{name}`" for name in names)
    return "\n".join(lines) + "\n"


async def _ask(openai_client: OpenAIClient, name: str, question: str) -> str:
    try:
        return await openai_client.send_message(name, question)
    except _OPENAI_ERRORS as exc:
        return f"**Error** consultando OpenAI: {exc}"


async def _weather() -> str | None:
    try:
        async with httpx.AsyncClient(timeout=None) as client:
            response = await client.get(WEATHER_URL, params={"lang": "es", "format": 3})
        return response.text
    except httpx.HTTPError:
        return None


async def respond(command: str, openai_client: OpenAIClient, names: list[str]) -> str | None:
    """Answer a chat command, or return None when it is not one the bot knows."""
    command = command.lower()
    if command == "!?":
        return help_text(names)
    if command == "!c ":
        prompt_name = _strip_prefix(command, "!c ").strip()
        try:
            openai_client.clear_messages(prompt_name)
        except LookupError as exc:
            return f"**Error** limpiando el historial de mensajes: {exc}"
        return f"**Historial de mensajes del prompt `{prompt_name}` limpiado**"
    if command == "!h":
        return str(time.time())
    if command.startswith("!h "):
        question = _strip_prefix(command, "!h ").strip()
        return await _ask(openai_client, HISTORY_PROMPT, question)
    if command == "!t":
        return await _weather()
    for name in names:
        prefix = f"!{name.lower()[0]} "
        if command.startswith(prefix):
            question = _strip_prefix(command, prefix).strip()
            return await _ask(openai_client, name, question)
    return None