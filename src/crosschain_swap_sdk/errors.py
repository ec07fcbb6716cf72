"""Errors raised by the cross-chain swap SDK."""


class OrderError(Exception):
    """Base class for all SDK errors."""


class InvalidSecret(OrderError, ValueError):
    """Secret is empty, malformed, or does not match the commitment."""


class InvalidLeafSet(OrderError, ValueError):
    """Merkle leaf set cannot be committed to."""


class EmptyLeafSet(InvalidLeafSet):
    """No leaves (or secrets) were supplied for a multi-fill commitment."""


class MissingEscrowExtension(OrderError):
    """A mandatory nested order structure could not be resolved."""


class ReconstructionAmbiguous(OrderError):
    """Not enough original secret material to rebuild an equivalent order."""


class MalformedTransportData(OrderError, ValueError):
    """Serialized order could not be decoded or is inconsistent."""

    def __init__(self, message, messages=None):
        super().__init__(message)
        self.messages = messages or {}


class InvalidOrderParams(OrderError, ValueError):
    """Order field has an invalid value."""
