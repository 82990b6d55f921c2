class RelayError(Exception):
    """A step of the relay pipeline failed; the invocation is aborted."""
    step = "relay"
    status_code = 500


class ConfigMissingError(RelayError):
    """A required environment variable is not set."""
    step = "config"
    status_code = 500

    def __init__(self, missing):
        self.missing = list(missing)
        names = ", ".join(self.missing)
        super().__init__(f"missing required environment variable(s): {names}")


class DecodeError(RelayError):
    """The event data is not a Pub/Sub MessagePublishedData payload."""
    step = "decode"
    status_code = 400


class RequestBuildError(RelayError):
    """The Honeycomb request could not be constructed (bad URL)."""
    step = "build_request"
    status_code = 500


class TransportError(RelayError):
    """Network-level failure talking to Honeycomb: connect, timeout, protocol."""
    step = "send"
    status_code = 502


class ResponseReadError(RelayError):
    """The request went out but its response body could not be read."""
    step = "read_response"
    status_code = 502
