"""Custom exception hierarchy for FinQuery."""


class FinQueryError(Exception):
    """Base exception for all FinQuery errors."""

    pass


# --- Validation / configuration ---


class ValidationError(FinQueryError):
    """Input validation failed."""

    pass


class ConfigurationError(FinQueryError):
    """Application configuration is invalid or missing required values."""

    pass


# --- Data source errors ---


class DataSourceError(FinQueryError):
    """Base for finance data source errors."""

    pass


class DataSourceConnectionError(DataSourceError):
    """Failed to connect to the finance data store."""

    pass


# --- Processing errors ---


class LLMError(FinQueryError):
    """The hosted language model call failed or returned nothing usable."""

    pass
