"""Error kinds surfaced by the extraction pipeline.

Field-level misses are never errors; extractors fall back to sentinel values.
Only input validation and fetch failures abort an extraction, plus date
parsing when the interpreter is configured to raise.
"""


class InputError(ValueError):
    """URL missing, malformed, or not on the source site's domain."""


class FetchError(RuntimeError):
    """The page could not be retrieved or rendered."""

    def __init__(self, message: str, *, url: str | None = None):
        super().__init__(message)
        self.url = url


class RenderTimeoutError(FetchError):
    """Navigation did not reach network idle within the timeout."""


class ContentNotRenderedError(FetchError):
    """The content marker never appeared after the page settled."""


class HttpStatusError(FetchError):
    def __init__(self, message: str, *, url: str | None = None, status_code: int):
        super().__init__(message, url=url)
        self.status_code = status_code


class DateParseError(ValueError):
    pass


class NoRecognizedPatternError(DateParseError):
    """No date/time shape in the catalogue matched the input text."""

    def __init__(self, text: str | None):
        super().__init__(f"No recognized date/time pattern in {text!r}")
        self.text = text
