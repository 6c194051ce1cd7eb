class GiftFinderError(Exception):
    pass


class ConfigError(GiftFinderError):
    """Raised when a settings update names an unknown provider, model or product source"""
    pass


class AIProviderError(GiftFinderError):
    """Raised when a text-generation backend call fails"""

    def __init__(self, message, provider=None, status_code=None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class AIResponseError(GiftFinderError):
    """Raised when the AI reply is not a JSON array of 6 {query, reason} objects"""
    pass
