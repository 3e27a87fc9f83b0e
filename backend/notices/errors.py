"""
Notice-specific error types.

All errors inherit from NoticesError for easy catching.
Checks themselves never raise these; they are raised by the
collaborators that assemble a check context.
"""


class NoticesError(Exception):
    """Base exception for all configuration-notice failures."""
    pass


class ConfigError(NoticesError):
    """Raised when a configuration file cannot be loaded or has the wrong shape."""
    
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid configuration in {path}: {reason}")


class RoutingCacheError(NoticesError):
    """Raised when the routing requirements cache cannot be written."""
    
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write routing cache {path}: {reason}")
