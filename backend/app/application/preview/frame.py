# app/application/preview/frame.py
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

# Scripts may run and talk to their own origin; no top navigation,
# popups or form submission out of the frame.
SANDBOX_POLICY = "allow-same-origin allow-scripts"


def validate_base_url(base_url: str) -> None:
    """Only absolute http(s) renderer addresses are accepted."""
    if not base_url:
        raise ValueError("A preview base URL is required")

    scheme, netloc = urlsplit(base_url)[:2]
    if scheme not in ("http", "https") or not netloc:
        raise ValueError(f"Invalid preview base URL: {base_url}")


def build_preview_url(base_url: str, page_slug: str, section_key: str, token: str) -> str:
    """
    Address of the external renderer for one section's draft.

    >>> build_preview_url("https://site.example", "home", "hero", "abc")
    'https://site.example/?page=home&section=hero&token=abc'
    """
    validate_base_url(base_url)
    scheme, netloc, path, query, _ = urlsplit(base_url)

    params = [
        (k, v) for k, v in parse_qsl(query, keep_blank_values=True)
        if k not in ("page", "section", "token")
    ]
    params += [("page", page_slug), ("section", section_key), ("token", token)]

    return urlunsplit((scheme, netloc, path or "/", urlencode(params), ""))
