class RiesgoVialError(Exception):
    """Base exception for all RiesgoVial errors."""

    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ReportValidationError(RiesgoVialError):
    """Raised when a submitted report is malformed."""
    status_code = 400


class ConfigurationError(RiesgoVialError):
    """Raised when configuration is invalid."""
    pass


class UpstreamError(RiesgoVialError):
    """Base for classified failures of the external feature service."""
    status_code = 502


class UpstreamConfigError(UpstreamError):
    """Raised when the feature service endpoint is not configured."""
    status_code = 500


class UpstreamNetworkError(UpstreamError):
    """Raised when the feature service cannot be reached."""
    status_code = 503


class UpstreamStatusError(UpstreamError):
    """Raised when the feature service answers with a non-2xx status."""
    pass


class UpstreamPayloadError(UpstreamError):
    """Raised when the feature service payload is not usable."""
    status_code = 502


class ReportSubmissionError(RiesgoVialError):
    """Raised on the client when a report cannot be submitted."""
    status_code = 400
