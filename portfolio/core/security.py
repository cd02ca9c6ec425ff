GITHUB_ACCEPT = "application/vnd.github+json"


def build_upstream_headers(token: str | None, user_agent: str) -> dict[str, str]:
    """Build the fixed header set sent to the GitHub REST API.

    The bearer credential is attached only when configured and is never
    echoed back to callers of the proxy.
    """

    headers = {
        "Accept": GITHUB_ACCEPT,
        "User-Agent": user_agent,
    }
    if token and token.strip():
        headers["Authorization"] = f"Bearer {token.strip()}"
    return headers


def is_valid_endpoint(endpoint: str | None) -> bool:
    """Return True when the proxied path is an absolute upstream path."""

    return bool(endpoint) and endpoint.startswith("/")
