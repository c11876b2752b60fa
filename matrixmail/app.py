"""The bot's main loop: follow the Matrix sync stream and answer commands."""

from __future__ import annotations

import argparse
import asyncio
import copy
import logging
import os
from typing import Any

import httpx

from matrixmail.bot import respond
from matrixmail.config import DEFAULT_CONFIG_PATH, Configuration
from matrixmail.matrix import MatrixClient
from matrixmail.openai import OpenAIClient

log = logging.getLogger(__name__)

SYNC_INTERVAL = 2
SYNC_ERROR_DELAY = 5


def _get(value: Any, key: str) -> Any:
    return value.get(key) if isinstance(value, dict) else None


def process_response(value: Any, matrix_client: MatrixClient) -> tuple[str, str] | None:
    """Find the first text message sent to one of the bot's rooms by someone else.

    Returns the room's local id and the message body.
    """
    sender = matrix_client.sender_id()
    rooms = _get(_get(value, "rooms"), "join")
    if not isinstance(rooms, dict):
        return None
    for room, room_value in rooms.items():
        compare_room = room.split(":", 1)[0]
        log.debug("Compare room: %s", compare_room)
        if compare_room not in (matrix_client.email_room, matrix_client.chat_room):
            return None
        events = _get(_get(room_value, "timeline"), "events")
        if not isinstance(events, list):
            continue
        for event in events:
            current_sender = _get(event, "sender")
            if isinstance(current_sender, str) and current_sender == sender:
                return None
            content = _get(event, "content")
            body = _get(content, "body")
            if _get(content, "msgtype") == "m.text" and isinstance(body, str):
                return compare_room, body
    return None


async def handle_sync_response(
    response: Any,
    configuration: Configuration,
    openai_client: OpenAIClient,
    names: list[str],
) -> str | None:
    """Answer the command found in a sync response; return the answer posted."""
    matrix = configuration.matrix_client
    found = process_response(response, matrix)
    if found is None:
        return None
    room, command = found
    log.debug("Command: %s", command)
    message = await respond(command, openai_client, names)
    if message is None:
        return None
    if room == matrix.chat_room:
        try:
            log.debug("Response: %s", await matrix.post_to_chat_room(message))
        except httpx.HTTPError as exc:
            log.error("Error: %s", exc)
    if room == matrix.email_room:
        try:
            log.debug("Response: %s", await matrix.post_to_email_room(message))
        except httpx.HTTPError as exc:
            log.error("Error: %s", exc)
    return message


def _log_error_chain(exc: BaseException) -> None:
    log.error("Can not sync: %s", exc)
    cause = exc.__cause__ or exc.__context__
    while cause is not None:
        log.error("caused by: %s", cause)
        cause = cause.__cause__ or cause.__context__


async def run_chat(configuration: Configuration, path: str | os.PathLike[str] = DEFAULT_CONFIG_PATH) -> None:
    """Sync forever, saving the configuration and answering each new command."""
    openai_client = copy.deepcopy(configuration.openai_client)
    names = list(openai_client.prompts)
    while True:
        try:
            response = await configuration.matrix_client.sync()
        except (httpx.HTTPError, ValueError) as exc:
            _log_error_chain(exc)
            await asyncio.sleep(SYNC_ERROR_DELAY)
        else:
            if response is not None:
                try:
                    configuration.save(path)
                except OSError as exc:
                    log.error("Cant save configuration: %s", exc)
                await handle_sync_response(response, configuration, openai_client, names)
        await asyncio.sleep(SYNC_INTERVAL)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="matrixmail", description="Matrix chat bot.")
    parser.add_argument("-c", "--config", default=DEFAULT_CONFIG_PATH, help="configuration file")
    args = parser.parse_args(argv)
    logging.basicConfig(level=os.environ.get("MATRIXMAIL_LOG", "ERROR").upper())
    log.info("Start")
    try:
        configuration = Configuration.read(args.config)
    except (OSError, ValueError) as exc:
        print(f"Error. Can not read configuration: {exc}")
        return 0
    try:
        asyncio.run(run_chat(configuration, args.config))
    except KeyboardInterrupt:
        pass
    return 0