"""Custom exception hierarchy for geosearch."""


class GeoSearchError(Exception):
    """Base exception for all geosearch errors."""


class ConfigurationError(GeoSearchError):
    """The control cannot be built from the given options or host map."""


class ProviderError(GeoSearchError):
    """A provider search call failed."""

    def __init__(self, query: str, reason: str):
        self.query = query
        self.reason = reason
        super().__init__(f"Search for '{query}' failed: {reason}")
