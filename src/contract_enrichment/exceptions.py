"""
Error classes for contract enrichment.

Hierarchy:
    EnrichmentError
    ├── AuthenticationRequiredError
    ├── QueryError
    └── ConfigError

Transport failures (httpx.HTTPError and subclasses) are not wrapped; they
propagate to the caller as-is.
"""


class EnrichmentError(Exception):
    """Base exception carrying a machine-readable code and an HTTP-style status."""

    def __init__(self, message: str, code: str = "UNEXPECTED", status: int = 500):
        self.code = code
        self.status = status
        super().__init__(message)


class AuthenticationRequiredError(EnrichmentError):
    """No usable access token was available for the remote CRM."""

    def __init__(self, message: str = "Salesforce authentication required"):
        super().__init__(message, code="SF_TOKEN_MISSING", status=401)


class QueryError(EnrichmentError):
    """The query service answered with a payload we cannot interpret."""

    def __init__(self, message: str, url: str | None = None):
        self.url = url
        super().__init__(message, code="SF_QUERY_MALFORMED", status=502)


class ConfigError(EnrichmentError):
    """Invalid configuration data, e.g. a malformed stage label file."""

    def __init__(self, message: str):
        super().__init__(message, code="CONFIG_INVALID", status=500)
