"""Errors raised by the bot."""


class BotError(Exception):
    """A failure reported by the bot itself, such as a rejected API request."""

    def __init__(self, msg: str) -> None:
        super().__init__(msg)
        self.msg = msg

    def __str__(self) -> str:
        return f"Error: {self.msg}"