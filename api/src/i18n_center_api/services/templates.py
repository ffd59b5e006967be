"""Bracket placeholder handling around machine translation.

A placeholder is the text from a `[` to the nearest following `]`. Brackets do
not nest: `[outer[inner]]` yields the token `outer[inner`.
"""

import re
from typing import List

PLACEHOLDER_RE = re.compile(r"\[([^\]]+)\]")


def extract_placeholders(text: str) -> List[str]:
    """Return the interior of every bracketed token, left to right."""
    return PLACEHOLDER_RE.findall(text)


def restore_placeholders(original: str, translated: str) -> str:
    """Put back placeholders the engine altered, by position.

    A placeholder that survived verbatim is left alone. Otherwise the token
    at the same ordinal position in the translated text is replaced with
    the original one. When the translation has fewer bracketed tokens than
    the original, the extra placeholders are dropped.
    """
    values = extract_placeholders(original)
    if not values:
        return translated

    result = translated
    for index, value in enumerate(values):
        placeholder = f"[{value}]"
        if placeholder in result:
            continue
        present = [match.group(0) for match in PLACEHOLDER_RE.finditer(result)]
        if index < len(present):
            result = result.replace(present[index], placeholder, 1)
    return result


def missing_placeholders(original: str, translated: str) -> List[str]:
    """Placeholders of `original` that do not appear verbatim in `translated`."""
    return [value for value in extract_placeholders(original) if f"[{value}]" not in translated]
