# matrixmail

A small Matrix bot. It follows the Matrix sync stream and answers text
commands written in its *email room* or its *chat room*, passing
questions on to an OpenAI-compatible chat completions endpoint. Replies
are written in Markdown; the bot sends both the plain text and the
rendered HTML to the room.

The package also has a helper, `matrixmail.mail`, that turns an e-mail
message into a short text summary suitable for posting to a room.

## Installation

```
pip install .
```

## Configuration

The bot reads its settings from a YAML file (`config.yml` in the current
directory unless `-c` says otherwise). Each time a sync returns a new
batch token the file is written back, so that the last sync position
(`since`) and the prompt conversation history survive a restart.

```yaml
pull_time: 60            # must be an integer from 0 to 65535
imap_server: {}          # any mapping; kept and written back unchanged
matrix_client:
  protocol: https
  server: matrix.example.com
  token: token
  email_room: "!mailroom"
  chat_room: "!chatroom"
  sender: mailbot        # the bot's own user name
  timeout: 30000         # passed to /sync as its timeout parameter
openai_client:
  protocol: https
  server: api.example.com
  api_key: placeholder
  model: gpt-4o-mini
  temperature: 0.7
  prompts:
    historia:
      prompt: "You answer questions about history."
      messages: []
    cocina:
      prompt: "You are a cooking assistant."
      messages: []
```

`Configuration.read` raises `ValueError` when the YAML is malformed, a
field is missing, `pull_time` is out of range or `imap_server` is not a
mapping.

Room ids are given without the `:server` part; the bot appends the
configured server when it sends to a room, and compares only the part
before the first `:` when it reads the sync response.

Each entry under `prompts` keeps its own conversation: the question and
the answer are appended to `messages` and the whole list is sent with
every new question. The `prompt` text itself is stored but not sent.

## Running

```
matrixmail
matrixmail --config /path/to/config.yml
```

The bot syncs every two seconds (five more after a failed sync) until it
is interrupted. Logging goes to standard error; its level is taken from
the `MATRIXMAIL_LOG` environment variable (default `ERROR`). If the
configuration cannot be read the bot prints the reason and exits with
status 0.

In each sync response the bot looks for the first `m.text` message in
one of its two rooms. It stops looking, and answers nothing, as soon as
it meets a room that is not one of its own or an event sent by its own
user (`@sender:server`).

## Commands

Commands are lower-cased before they are matched, so questions are sent
to the model in lower case too. The answer is posted to the room the
command came from.

| Command            | What it does                                                  |
|--------------------|---------------------------------------------------------------|
| `!?`               | Lists the commands and one `!<letter>` line per prompt        |
| `!h`               | Current time as seconds since the Unix epoch                  |
| `!h <question>`    | Asks the `historia` prompt                                    |
| `!t`               | Current weather report for Silla, in Spanish                  |
| `!<x> <question>`  | Asks the first prompt whose name starts with the letter `<x>` |

The help text also lists `!c <prompt>`, but only the bare text `!c `
is handled as a clear command, and it looks for a prompt with an empty
name; `!c <text>` is otherwise treated as a question to a prompt whose
name starts with `c`. `OpenAIClient.clear_messages(name)` clears a
prompt's history when called directly.

Errors from the completions endpoint are reported in the room as
`**Error** consultando OpenAI: ...`. Anything else gets no reply.

## Using it as a library

```python
import asyncio

from matrixmail.bot import help_text, respond
from matrixmail.config import Configuration

configuration = Configuration.read("config.yml")
openai_client = configuration.openai_client
names = list(openai_client.prompts)

print(help_text(names))
print(asyncio.run(respond("!h", openai_client, names)))
```

- `matrixmail.config.Configuration` — `from_yaml`, `read`, `save`, `to_dict`.
- `matrixmail.matrix.MatrixClient` — `sync()`, `post(room, markdown)`,
  `post_to_chat_room`, `post_to_email_room`, `sender_id()`.
- `matrixmail.openai.OpenAIClient` — `send_message(name, message)` and
  `clear_messages(name)`; an unknown prompt raises `LookupError`, a
  failed request raises `matrixmail.errors.BotError`.
- `matrixmail.app.process_response` and `handle_sync_response` — the
  steps of the main loop, usable on a sync response you already have.
- `matrixmail.mail.Mail.from_message(mail_id, message)` — accepts an
  `email.message.Message`, bytes or a string; `str()` of the result gives
  `Id`, `Reg` (the Message-ID), `From`, `Subject` and `Body` lines. The
  body is the text/plain parts, or the text/html parts if there are none.
  A message without a Message-ID raises `BotError`.

## What it does not do

The bot does not connect to a mailbox. Nothing in the package reads
mail from a server or posts mail to the email room on its own;
`imap_server` and `pull_time` are only read, checked and written back.
To forward mail, fetch the messages yourself, format them with
`Mail.from_message` and send them with `MatrixClient.post_to_email_room`.

## Tests

```
pip install .[test]
pytest
```