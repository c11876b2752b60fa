"""Matrix bot that answers chat commands with OpenAI-compatible prompts and formats e-mail for a room."""

__version__ = "0.1.0"