"""
Custom Exceptions
Error taxonomy for the acquisition engine
"""


class RecapError(Exception):
    """Base exception for the recap pipeline"""
    
    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)
    
    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(RecapError):
    """Invalid or missing configuration"""
    pass


class StorageError(RecapError):
    """Storage failure"""
    pass


class CacheError(StorageError):
    """Cache read/write failure or invalid cache key"""
    pass


class ScraperError(RecapError):
    """News index or item API failure"""
    
    def __init__(self, message: str, source: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.source = source


class FetchError(RecapError):
    """
    Raised by the bounded fetcher once every attempt has failed.
    The last underlying error is chained as ``__cause__``.
    """
    
    def __init__(self, message: str, url: str = None, attempts: int = 0, **kwargs):
        super().__init__(message, kwargs)
        self.url = url
        self.attempts = attempts


class ExtractionError(RecapError):
    """Content could not be decoded (e.g. a malformed PDF)"""
    pass


class RenderError(RecapError):
    """Browser rendering or capture failure"""
    
    def __init__(self, message: str, url: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.url = url


class BotProtectionError(RenderError):
    """The rendered page is still a bot-challenge or empty page"""
    pass


class DomainHandlerError(RecapError):
    """A platform-specific handler could not produce a visual"""
    
    def __init__(self, message: str, handler: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.handler = handler


class InsufficientStoriesError(RecapError):
    """Fewer distinct stories than requested remain after filtering"""
    
    def __init__(self, found: int, expected: int):
        super().__init__(
            f"Not enough stories to cover. Found {found}, expected {expected}",
            {"found": found, "expected": expected},
        )
        self.found = found
        self.expected = expected
