"""Stream error types."""


class StreamError(Exception):
    """Base class for all stream errors."""


class TransportUnsupportedError(StreamError):
    """The host response cannot flush, so it cannot carry a stream."""


class TransportError(StreamError):
    """Writing or flushing to the client failed."""


class SerializationError(StreamError):
    """An event payload could not be encoded as JSON."""


class StreamErrorEvent(StreamError):
    """An ``err`` frame received from a server."""
