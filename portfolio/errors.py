class PortfolioLoadError(Exception):
    """Base class for failures while loading one portfolio section."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ResourceNotFoundError(PortfolioLoadError):
    """Raised when GitHub answers 404 for a resource."""

    kind = "not_found"

    def __init__(self, resource: str) -> None:
        super().__init__(f"{resource} was not found.")


class RateLimitError(PortfolioLoadError):
    """Raised when GitHub answers 403, which it uses for rate limiting."""

    kind = "rate_limited"

    def __init__(self, resource: str) -> None:
        super().__init__(f"GitHub API rate limit reached while loading {resource}.")


class UpstreamRequestError(PortfolioLoadError):
    """Raised for any other non-2xx upstream status."""

    kind = "upstream"

    def __init__(self, resource: str, status_code: int) -> None:
        super().__init__(f"{resource} request failed ({status_code}).")
        self.status_code = status_code


class UnexpectedLoadError(PortfolioLoadError):
    """Raised for transport failures and unreadable payloads."""

    kind = "unexpected"

    def __init__(self, message: str = "Unexpected error while loading GitHub data.") -> None:
        super().__init__(message)


class SubjectValidationError(ValueError):
    """Raised when an explicit submission is missing the user or the org."""

    def __init__(
        self, message: str = "Please provide both a GitHub user and organization."
    ) -> None:
        super().__init__(message)
        self.message = message
