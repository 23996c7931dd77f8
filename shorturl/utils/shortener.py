"""Shortcode generation utility

This module provides a helper function for generating random, fixed-length
short codes drawn from the Base62 alphabet.

Functions:
    generate_shortcode(length=SHORT_CODE_MAX_LENGTH, alphabet=ALPHABET):
        Generate a random short code suitable for use as a URL slug.

Example:
    >>> from shorturl.utils import generate_shortcode
    >>> generate_shortcode()
    'q3ZbT0xA'
"""

from nanoid import generate

from shorturl.constants import ALPHABET, SHORT_CODE_MAX_LENGTH


def generate_shortcode(length: int = SHORT_CODE_MAX_LENGTH, alphabet: str = ALPHABET) -> str:
    """Generate a random short code of exactly `length` characters.

    Every character is drawn uniformly from `alphabet` by nanoid, which reads
    from the OS CSPRNG. With the default Base62 alphabet each character carries
    log2(62) ~ 5.95 bits of entropy, i.e. ~47.6 bits for an 8-character code.

    Args:
        length (int, optional):
            Number of characters to generate.
            Defaults to SHORT_CODE_MAX_LENGTH.

        alphabet (str, optional):
            Symbols to draw from.
            Defaults to [a-zA-Z0-9].

    Returns:
        str: A random short code.

    Raises:
        TypeError: If `length` is not an integer or `alphabet` is not a string.
        ValueError: If `length` is < 1 or `alphabet` is empty.

    NOTE:
        - Uniqueness is not guaranteed here. Callers must insert the code
          through a uniqueness-enforcing data store and retry on collision.
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length < 1:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')
    if not isinstance(alphabet, str):
        raise TypeError(f'Alphabet must be of type string (given type: {type(alphabet)}).')
    if not alphabet:
        raise ValueError('Alphabet must be a non-empty string.')

    return generate(alphabet, length)
