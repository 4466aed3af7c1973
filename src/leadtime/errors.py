# leadtime/errors.py


class LeadTimeError(Exception):
    """Base class for every failure surfaced to the command line."""


class ConfigurationError(LeadTimeError):
    pass


class InvalidCutoffError(LeadTimeError):
    def __init__(self, value: str, reason: str = ""):
        self.value = value
        message = f"invalid cutoff date: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class GitHubAPIError(LeadTimeError):
    """A listing or status lookup against the GitHub API failed."""

    def __init__(self, message: str, status: int | None = None, url: str | None = None):
        self.status = status
        self.url = url
        super().__init__(message)

    def __str__(self) -> str:
        base = super().__str__()
        if self.status is not None:
            base = f"{base} (HTTP {self.status})"
        if self.url:
            base = f"{base} [{self.url}]"
        return base
