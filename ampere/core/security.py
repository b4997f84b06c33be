from urllib.parse import urlsplit


def redact_token(token: str | None, visible_chars: int = 8) -> str:
    """
    Redact a token (session id, storage key) for logging purposes.
    Shows the first few characters followed by ***.
    """
    if not token:
        return "None"
    if len(token) <= visible_chars:
        return "***"
    return f"{token[:visible_chars]}***"


def redact_url(url: str | None) -> str:
    """Reduce a URL to its hostname so query strings never reach telemetry."""
    if not url:
        return "unknown"
    try:
        host = urlsplit(str(url)).hostname
    except ValueError:
        return "unknown"
    return host or "unknown"
