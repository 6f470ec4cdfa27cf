"""Domain errors and failure typing."""


class SimulationError(Exception):
    """Base class for simulate failures."""

    error_code = "SIMULATION_ERROR"


class ConfigError(SimulationError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class ContractError(SimulationError):
    """Raised when a payload does not have the agreed shape."""

    error_code = "CONTRACT_ERROR"


class DecodingError(SimulationError):
    """Raised when an encoded response is truncated or corrupted."""

    error_code = "DECODING_ERROR"


MalformedEncoding = DecodingError


class InvalidResultError(SimulationError, ValueError):
    """Raised when a result is built in a state it cannot represent."""

    error_code = "INVALID_RESULT"


class InvalidFailureDescriptor(InvalidResultError):
    """Raised for a failure descriptor without an identifiable kind."""

    error_code = "INVALID_FAILURE_DESCRIPTOR"


class TransportError(SimulationError):
    """Raised when the cluster cannot be reached or answers with an error."""

    error_code = "TRANSPORT_ERROR"


class RetryableTransportError(TransportError):
    pass
