#  Weather Proxy - Custom Exceptions
#
#  Typed exception hierarchy so the app can map pipeline errors to HTTP
#  status codes without pattern-matching on message strings.
#
#  Depends on: (none)
#  Used by:    services/forwarder.py, app.py

class ProxyError(Exception):
    """Base exception for all proxy pipeline errors."""


class UpstreamUnavailableError(ProxyError):
    """The upstream API could not be reached (connection, DNS, timeout).

    Only the exception class name is kept; the transport message may carry
    the outbound URL, and with it the API key.
    """

    def __init__(self, cause: Exception):
        self.error_type = type(cause).__name__
        super().__init__(f"Upstream request failed ({self.error_type})")
