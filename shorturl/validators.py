"""Input validation for long URLs and short codes.

Functions:
    validate_long_url(url) -> None
        Raise InvalidLongURLError unless `url` is an absolute URL with scheme and a valid host.
    validate_short_code(code, max_length=SHORT_CODE_MAX_LENGTH) -> None
        Raise CodeTooLongError or InvalidShortCodeError on malformed short codes.

Both functions are pure: no I/O, no side effects.

Example:
    >>> validate_long_url('https://example.com/a')
    >>> validate_long_url('example.com/a')
    Traceback (most recent call last):
        ...
    shorturl.exceptions.InvalidLongURLError: Invalid long URL format: 'example.com/a'.
"""

import re
import ipaddress
from typing import Any
from urllib.parse import urlparse

from shorturl.constants import ALPHABET, SHORT_CODE_MAX_LENGTH
from shorturl.exceptions import CodeTooLongError, InvalidLongURLError, InvalidShortCodeError


_ALPHABET_SET = frozenset(ALPHABET)

# Letters and digits of any script, inner hyphens; no underscores
_HOST_LABEL = re.compile(r'[^\W_](?:(?:[^\W_]|-){0,61}[^\W_])?')
_HOSTNAME_MAX_LENGTH = 253


def _is_valid_hostname(hostname: str) -> bool:
    try:
        ipaddress.ip_address(hostname)
        return True
    except ValueError:
        pass

    hostname = hostname.removesuffix('.')
    if not hostname or len(hostname) > _HOSTNAME_MAX_LENGTH:
        return False
    return all(_HOST_LABEL.fullmatch(label) for label in hostname.split('.'))


def validate_long_url(url: Any) -> None:
    """Ensure `url` parses as an absolute URL with a scheme and a valid host

    Whitespace and control characters are rejected anywhere in the URL.

    Args:
        url (Any):
            Candidate long URL.

    Raises:
        InvalidLongURLError:
            If `url` is not a string, contains whitespace or control characters,
            has no scheme, or has a missing or malformed host.
    """
    if not isinstance(url, str) or not url or any(ch.isspace() or not ch.isprintable() for ch in url):
        raise InvalidLongURLError(f'Invalid long URL format: {url!r}.')

    try:
        components = urlparse(url)
        hostname = components.hostname
        components.port  # raises on a non-numeric or out-of-range port
    except ValueError as e:  # e.g. malformed IPv6 netloc
        raise InvalidLongURLError(f'Invalid long URL format: {url!r}.') from e

    if not components.scheme or not hostname or not _is_valid_hostname(hostname):
        raise InvalidLongURLError(f'Invalid long URL format: {url!r}.')


def validate_short_code(code: Any, max_length: int = SHORT_CODE_MAX_LENGTH) -> None:
    """Ensure `code` has 1..max_length characters drawn from the short code alphabet

    Args:
        code (Any):
            Candidate short code.
        max_length (int):
            Upper length bound. Defaults to SHORT_CODE_MAX_LENGTH.

    Raises:
        CodeTooLongError:
            If the code is empty or longer than `max_length`.
        InvalidShortCodeError:
            If the code is not a string or contains characters outside [A-Za-z0-9].
    """
    if not isinstance(code, str):
        raise InvalidShortCodeError(f'Short code must be a string (given type: {type(code)}).')

    if not 1 <= len(code) <= max_length:
        raise CodeTooLongError(f'Short code must be 1 to {max_length} characters long (given length: {len(code)}).')

    if not _ALPHABET_SET.issuperset(code):
        raise InvalidShortCodeError(f"Short code '{code}' may only contain letters and digits.")
