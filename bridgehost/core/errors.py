"""Domain-specific errors for bridgehost."""


class BridgeHostError(Exception):
    """Base error for bridgehost."""


class ManifestValidationError(BridgeHostError):
    """Raised when a plugin manifest cannot be read or does not conform to schema."""


class PluginLoadError(BridgeHostError):
    """Raised when a plugin cannot be loaded."""


class PluginNotLoadedError(BridgeHostError):
    """Raised when a plugin is initialized before it was loaded."""


class DuplicateRegistrationError(BridgeHostError):
    """Raised when a plugin registers the same accessory or platform name twice."""


class NotRegisteredError(BridgeHostError):
    """Raised when a requested accessory or platform was never registered."""


class AccessorySerializationError(BridgeHostError):
    """Raised when a platform accessory cannot be turned into a persisted record."""
