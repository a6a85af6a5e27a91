ERR_PRECONDITION = "PRECONDITION"
ERR_INVALID_INPUT = "INVALID_INPUT"
ERR_DEVICE_UNAVAILABLE = "DEVICE_UNAVAILABLE"
ERR_SERVICE_FAILURE = "SERVICE_FAILURE"
ERR_MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
ERR_TIMEOUT = "TIMEOUT"
ERR_UNKNOWN = "UNKNOWN"


class PipelineError(Exception):
    code = ERR_UNKNOWN


class InvalidInput(PipelineError):
    """Bad or missing image file."""
    code = ERR_INVALID_INPUT


class DeviceUnavailable(PipelineError):
    """Camera denied, absent, or stopped delivering frames."""
    code = ERR_DEVICE_UNAVAILABLE


class PreconditionViolation(PipelineError):
    """Caller misuse: capture without a session, identify while in flight, ..."""
    code = ERR_PRECONDITION


class ServiceFailure(PipelineError):
    """Transport or service-level error from the inference backend."""
    code = ERR_SERVICE_FAILURE


class MalformedResponse(PipelineError):
    """Reply is not the six-field structure; no result is produced."""
    code = ERR_MALFORMED_RESPONSE
