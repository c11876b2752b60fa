"""The bot's configuration file."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from matrixmail.matrix import MatrixClient
from matrixmail.openai import OpenAIClient

DEFAULT_CONFIG_PATH = "config.yml"
_MAX_PULL_TIME = 65535


@dataclass
class Configuration:
    """Settings for the mail poller, the Matrix client and the OpenAI client."""

    pull_time: int
    matrix_client: MatrixClient
    openai_client: OpenAIClient
    imap_server: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_yaml(cls, content: str) -> Configuration:
        """Parse a configuration; raise ValueError if it is malformed."""
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise ValueError(f"invalid YAML: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError("configuration must be a mapping")
        try:
            pull_time = int(data["pull_time"])
            imap_server = data["imap_server"]
            matrix_client = MatrixClient.from_dict(data["matrix_client"])
            openai_client = OpenAIClient.from_dict(data["openai_client"])
        except KeyError as exc:
            raise ValueError(f"missing field {exc}") from exc
        except (TypeError, AttributeError) as exc:
            raise ValueError(f"invalid configuration: {exc}") from exc
        if not 0 <= pull_time <= _MAX_PULL_TIME:
            raise ValueError(f"pull_time out of range: {pull_time}")
        if not isinstance(imap_server, dict):
            raise ValueError("imap_server must be a mapping")
        return cls(
            pull_time=pull_time,
            matrix_client=matrix_client,
            openai_client=openai_client,
            imap_server=imap_server,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "pull_time": self.pull_time,
            "imap_server": self.imap_server,
            "matrix_client": self.matrix_client.to_dict(),
            "openai_client": self.openai_client.to_dict(),
        }

    @classmethod
    def read(cls, path: str | os.PathLike[str] = DEFAULT_CONFIG_PATH) -> Configuration:
        return cls.from_yaml(Path(path).read_text(encoding="utf-8"))

    def save(self, path: str | os.PathLike[str] = DEFAULT_CONFIG_PATH) -> None:
        content = yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True)
        Path(path).write_text(content, encoding="utf-8")