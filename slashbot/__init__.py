"""slashbot -- Discord slash-command bot service."""

__version__ = "1.0.0"
