"""Error taxonomy shared by the core pipeline and its adapters."""

from __future__ import annotations


class SpamGuardError(Exception):
    """Base class for all spamguard errors."""


class ConfigMissing(SpamGuardError):
    """Required configuration is absent or invalid. Fatal at startup."""


class PipelineError(SpamGuardError):
    """A per-message failure. Reported to the chat, never fatal."""


class TransportError(PipelineError):
    """The completion request could not be sent or the connection failed."""


class DecodeError(PipelineError):
    """A frame of the completion stream did not have the expected shape."""


class EmptyResponseError(PipelineError):
    """The completion service streamed no usable text."""


class MalformedVerdictError(PipelineError):
    """The model output could not be decoded into a spam assessment."""


class PlatformActionError(SpamGuardError):
    """Deleting or sending a chat message failed."""
