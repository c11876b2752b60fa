"""Summaries of e-mail messages suitable for posting to a chat room."""

from __future__ import annotations

import email
import email.policy
from dataclasses import dataclass
from email.message import Message
from email.utils import getaddresses

from matrixmail.errors import BotError


def _as_message(message: Message | bytes | str) -> Message:
    if isinstance(message, bytes):
        return email.message_from_bytes(message, policy=email.policy.default)
    if isinstance(message, str):
        return email.message_from_string(message, policy=email.policy.default)
    return message


def format_addresses(message: Message | bytes | str) -> str:
    """Return the From addresses as ``name <address>`` entries joined by commas."""
    message = _as_message(message)
    header = message.get("From")
    if header is None:
        return ""
    if hasattr(header, "addresses"):
        pairs = [(addr.display_name or "", addr.addr_spec or "") for addr in header.addresses]
    else:
        pairs = getaddresses([str(header)])
    return ", ".join(f"{name} <{address}>" for name, address in pairs)


def _decode_part(part: Message) -> str:
    payload = part.get_payload(decode=True)
    if payload is None:
        return ""
    charset = part.get_content_charset() or "utf-8"
    try:
        return payload.decode(charset, errors="replace")
    except LookupError:
        return payload.decode("utf-8", errors="replace")


def _text_body(message: Message) -> str:
    plain: list[str] = []
    html: list[str] = []
    for part in message.walk():
        if part.is_multipart() or part.get_content_disposition() == "attachment":
            continue
        content_type = part.get_content_type()
        if content_type == "text/plain":
            plain.append(_decode_part(part))
        elif content_type == "text/html":
            html.append(_decode_part(part))
    return "".join(plain if plain else html)


@dataclass
class HeaderMail:
    """The identifying headers of a message."""

    id: int
    reg: str
    sender: str
    subject: str

    @classmethod
    def from_message(cls, mail_id: int, message: Message | bytes | str) -> HeaderMail:
        message = _as_message(message)
        message_id = message.get("Message-ID")
        if message_id is None:
            raise BotError("Message without Message-ID")
        reg = str(message_id).strip().strip("<>").strip()
        subject = message.get("Subject")
        return cls(
            id=mail_id,
            reg=reg,
            sender=format_addresses(message),
            subject=str(subject) if subject is not None else "",
        )

    def __str__(self) -> str:
        return f"Id: {self.id}\nReg: {self.reg}\nFrom: {self.sender}\nSubject: {self.subject}"


@dataclass
class Mail:
    """A message's headers together with its text body."""

    header: HeaderMail
    body: str

    @classmethod
    def from_message(cls, mail_id: int, message: Message | bytes | str) -> Mail:
        message = _as_message(message)
        return cls(header=HeaderMail.from_message(mail_id, message), body=_text_body(message))

    def __str__(self) -> str:
        return f"{self.header}\nBody: {self.body}"