"""Failures the link registry reports to its callers."""


class LinkError(Exception):
    pass


class ValidationError(LinkError):
    """Required input is missing or malformed."""


class DuplicateCodeError(LinkError):
    def __init__(self, code: str):
        super().__init__(f"Code '{code}' already taken, try another.")
        self.code = code


class NotFound(LinkError):
    def __init__(self, code: str):
        super().__init__(f"No link for code '{code}'")
        self.code = code


class ExternalProbeFailure(Exception):
    """Raised inside the preview probe only; always degraded to an unknown result."""
