"""Domain-specific errors for upmon."""


class UpmonError(Exception):
    """Base error for upmon."""


class ConfigurationError(UpmonError):
    """Raised when the monitored target configuration is invalid."""


class DuplicatePathError(ConfigurationError):
    """Raised when the same device path is configured more than once."""


class UnsupportedPropertyError(ConfigurationError):
    """Raised when a requested property has no entry in the property catalog."""


class CatalogValidationError(UpmonError):
    """Raised when the property catalog does not conform to schema or semantics."""


class CatalogLoadError(UpmonError):
    """Raised when reading the property catalog fails."""


class ValueKindError(UpmonError):
    """Raised when a raw value does not match the kind its property declares."""


class SubscriptionError(UpmonError):
    """Raised when change notifications for a device path cannot be subscribed to."""


class TransportError(UpmonError):
    """Base transport error."""


class TransportConnectError(TransportError):
    """Raised when the system bus connection cannot be established."""


class TransportDisconnectedError(TransportError):
    """Raised when the bus connection is lost while monitoring."""


class SinkWriteError(UpmonError):
    """Raised when the output destination cannot be opened or written."""
