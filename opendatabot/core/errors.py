"""
Application errors for clean API error handling.

Each step of the bot raises one of these with the step as context, so the API
layer can map them to a status code and a user-facing message.
"""


class ServiceUnavailableError(Exception):
    """Raised when a required service (OpenAI key, open data DB, graph store) is unavailable or misconfigured."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class PromptTemplateError(Exception):
    """Raised when a prompt template cannot be parsed or rendered."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class LLMRequestError(Exception):
    """Raised when the chat completion request fails."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ResponseDecodeError(Exception):
    """Raised when the model reply is not the JSON object we asked for. Keeps the raw reply in `content`."""

    def __init__(self, content: str, reason: str) -> None:
        self.content = content
        self.message = f"unmarshalling response {content!r}: {reason}"
        super().__init__(self.message)


class GraphStoreError(Exception):
    """Raised when writing a module to the content graph store fails."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
