class ServiceError(Exception):
    pass


class GeminiConfigurationError(ServiceError):
    pass


class GeminiPromptError(ServiceError):
    pass


class GeminiRequestError(ServiceError):
    pass


class GeminiResponseError(ServiceError):
    pass


class RateLimitedError(ServiceError):
    pass


class GenerationTimeoutError(ServiceError):
    def __init__(self, model_name: str, timeout_seconds: float):
        super().__init__(f"Generation timeout after {timeout_seconds}s: {model_name}")
        self.model_name = model_name
        self.timeout_seconds = timeout_seconds
