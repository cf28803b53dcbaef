"""
Relay Service Exceptions

Errors raised by the provider abstraction layer.
"""


class RelayServiceError(Exception):
    """Base exception for relay service errors"""
    pass


class ConfigurationError(RelayServiceError):
    """Raised when an engine is invoked without its required credentials"""
    pass


class ProviderError(RelayServiceError):
    """Raised when a provider call fails or returns an unusable response"""
    pass


class NoEngineAvailableError(RelayServiceError):
    """Raised when the registry has no available translation engine"""

    def __init__(self, message: str = "No translation engine available"):
        super().__init__(message)


class CacheIOError(RelayServiceError):
    """Raised when a cache artifact cannot be written"""
    pass
