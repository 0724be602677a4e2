"""Form Gateway: token-gated form submissions for a Discord bot."""

__version__ = "0.1.0"
