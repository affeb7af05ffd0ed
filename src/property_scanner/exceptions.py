"""Error types raised across the scan pipeline."""


class PropertyScannerError(Exception):
    """Base class for property scanner failures."""


class ConfigurationError(PropertyScannerError, ValueError):
    """Scan configuration is missing or malformed. Fatal for the scan."""


class ProviderError(PropertyScannerError):
    """Listing search or rent-estimate lookup failed."""


class TransportError(PropertyScannerError):
    """Mail transport could not deliver a message."""
