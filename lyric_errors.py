"""
Exception types raised by Lyric Buddy.
Every one of these is fatal; lyric_buddy.main() reports it and exits non-zero.
"""


class LyricBuddyError(RuntimeError):
    """Base class for all Lyric Buddy failures."""


class ConfigurationError(LyricBuddyError):
    """The .env file is unreadable or a required setting is missing or malformed."""


class SecretResolutionError(LyricBuddyError):
    """SOPS could not produce a usable API key."""


class ChatTransportError(LyricBuddyError):
    """The chat completion request never got a response (network, DNS, TLS)."""


class ChatResponseError(LyricBuddyError):
    """The chat completion response body was not valid JSON."""
