"""Random note identifier generation."""

from __future__ import annotations

import secrets
import string
from typing import Callable

from .models import IDOptions

CHARSETS: dict[str, str] = {
    "alphanum": string.digits + string.ascii_letters,
    "hex": string.digits + "abcdef",
    "letters": string.ascii_letters,
    "numbers": string.digits,
}


def resolve_charset(options: IDOptions) -> str:
    """Return the characters an id is drawn from.

    Named charsets are looked up in CHARSETS, anything else is used as a
    literal set of characters. The case option is applied afterwards and
    duplicate characters are dropped.
    """
    charset = CHARSETS.get(options.charset, options.charset)
    if options.case == "lower":
        charset = charset.lower()
    elif options.case == "upper":
        charset = charset.upper()
    return "".join(dict.fromkeys(charset))


def new_id_generator(options: IDOptions) -> Callable[[], str]:
    """Create a function returning a new random id on each call."""
    charset = resolve_charset(options)
    length = options.length

    def generate() -> str:
        return "".join(secrets.choice(charset) for _ in range(length))

    return generate
