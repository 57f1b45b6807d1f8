from typing import Any, Optional


class AbillioError(RuntimeError):
    pass


class ConfigurationError(AbillioError):
    pass


class TransportError(AbillioError):
    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class UpstreamError(AbillioError):
    """Non-2xx response from the Abillio API.

    `body` is the parsed JSON payload when the upstream sent one, else the raw text.
    """

    def __init__(self, status_code: int, body: Any = None, url: Optional[str] = None) -> None:
        self.status_code = status_code
        self.body = body
        self.url = url
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        detail = "" if self.body in (None, "") else f": {str(self.body)[:200]}"
        target = f" at {self.url}" if self.url else ""
        return f"Abillio API HTTP {self.status_code}{target}{detail}"


class DecodeError(AbillioError):
    def __init__(self, status_code: int, text: str, url: Optional[str] = None) -> None:
        self.status_code = status_code
        self.text = text
        self.url = url
        super().__init__(f"Abillio API returned non-JSON at {url}: {text[:200]}")
