"""Input validation utilities"""

import re
from urllib.parse import urlsplit


def validate_issuer_url(url: str) -> tuple[bool, str | None]:
    """
    Validate an issuer URL override

    Requirements:
    - Well-formed absolute URI
    - https scheme
    - No query component
    - No fragment component
    - Path does not end with a slash

    Args:
        url: Issuer URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url:
        return False, "Issuer URI is required"

    if re.search(r"\s", url):
        return False, "Not a well-formed URI"

    try:
        parts = urlsplit(url)
        # Accessing port validates it
        parts.port
    except ValueError:
        return False, "Not a well-formed URI"

    if parts.scheme != "https":
        return False, "Issuer URIs should use https scheme"

    if not parts.netloc:
        return False, "Not a well-formed URI"

    before_fragment = url.split("#", 1)[0]
    if "?" in before_fragment:
        return False, "Issuer URIs must not have a query component"

    if "#" in url:
        return False, "Issuer URIs must not have a fragment component"

    if parts.path.endswith("/"):
        return False, "Issuer URIs should not end with a slash (/) in this context"

    return True, None
