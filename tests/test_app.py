import httpx
import pytest
import respx

from matrixmail.app import handle_sync_response, main, process_response
from matrixmail.bot import help_text
from matrixmail.config import Configuration
from matrixmail.matrix import MatrixClient
from matrixmail.openai import OpenAIClient, Prompt


def make_matrix():
    return MatrixClient(
        protocol="https",
        server="matrix.example.com",
        token="token",
        email_room="!mail",
        chat_room="!chat",
        sender="bot",
        timeout=30,
    )


def make_configuration():
    openai_client = OpenAIClient(
        protocol="https",
        server="openai.example.com",
        api_key="placeholder",
        model="model",
        temperature=0.5,
        prompts={"asistente": Prompt(prompt="p")},
    )
    return Configuration(pull_time=60, matrix_client=make_matrix(), openai_client=openai_client)


def sync_value(room, *events):
    return {"rooms": {"join": {room: {"timeline": {"events": list(events)}}}}}


def text_event(sender, body, msgtype="m.text"):
    return {"sender": sender, "content": {"msgtype": msgtype, "body": body}}


def test_process_response_finds_text_message():
    value = sync_value("!chat:matrix.example.com", text_event("@alice:matrix.example.com", "!?"))
    assert process_response(value, make_matrix()) == ("!chat", "!?")


def test_process_response_ignores_own_messages():
    value = sync_value("!mail:matrix.example.com", text_event("@bot:matrix.example.com", "!?"))
    assert process_response(value, make_matrix()) is None


def test_process_response_ignores_other_rooms():
    value = sync_value("!other:matrix.example.com", text_event("@alice:matrix.example.com", "!?"))
    assert process_response(value, make_matrix()) is None


def test_process_response_skips_non_text_events():
    value = sync_value(
        "!chat:matrix.example.com",
        text_event("@alice:matrix.example.com", "img", msgtype="m.image"),
        text_event("@alice:matrix.example.com", "!h"),
    )
    assert process_response(value, make_matrix()) == ("!chat", "!h")


def test_process_response_without_rooms():
    assert process_response({"next_batch": "b"}, make_matrix()) is None


@pytest.mark.asyncio
async def test_handle_sync_response_posts_answer_to_chat_room():
    configuration = make_configuration()
    value = sync_value("!chat:matrix.example.com", text_event("@alice:matrix.example.com", "!?"))
    with respx.mock(assert_all_called=False) as router:
        chat = router.put(url__regex=r".*/rooms/.*chat:.*").mock(return_value=httpx.Response(200, text="{}"))
        mail = router.put(url__regex=r".*/rooms/.*mail:.*").mock(return_value=httpx.Response(200, text="{}"))
        result = await handle_sync_response(value, configuration, configuration.openai_client, ["asistente"])
    assert result == help_text(["asistente"])
    assert chat.call_count == 1
    assert mail.call_count == 0
    request = chat.calls.last.request
    assert request.headers["Authorization"] == "Bearer token"


@pytest.mark.asyncio
async def test_handle_sync_response_without_command_posts_nothing():
    configuration = make_configuration()
    value = sync_value("!mail:matrix.example.com", text_event("@alice:matrix.example.com", "hola"))
    with respx.mock(assert_all_called=False) as router:
        route = router.put(host="matrix.example.com").mock(return_value=httpx.Response(200))
        result = await handle_sync_response(value, configuration, configuration.openai_client, ["asistente"])
    assert result is None
    assert route.call_count == 0


def test_main_reports_unreadable_configuration(tmp_path, capsys):
    assert main(["--config", str(tmp_path / "absent.yml")]) == 0
    assert "Error. Can not read configuration:" in capsys.readouterr().out