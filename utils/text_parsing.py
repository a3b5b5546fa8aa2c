"""Text normalization and oracle response parsing."""

import math
import re
from typing import Optional

# First signed decimal number in a free-text reply, e.g. "0.7543" or "-0.12"
NUMBER_PATTERN = re.compile(r'-?\d+(?:\.\d+)?')

# Characters the model likes to wrap single-word answers in
WORD_NOISE_PATTERN = re.compile(r'["\'.`*“”‘’]')


def normalize_word(word: str) -> str:
    """
    Normalize a word for duplicate comparison.

    - Strip leading/trailing whitespace
    - Collapse inner whitespace runs to a single space
    - Case-fold
    """
    if not word:
        return ""

    word = re.sub(r'\s+', ' ', word.strip())
    return word.casefold()


def clean_oracle_word(text: str) -> str:
    """
    Clean a single-word reply from the oracle.

    Keeps only the first non-empty line and removes quoting and periods.
    Returns an empty string if nothing usable is left.
    """
    if not text:
        return ""

    for line in text.splitlines():
        line = WORD_NOISE_PATTERN.sub('', line).strip()
        if line:
            return line

    return ""


def clamp_similarity(value: float) -> float:
    """Clamp a similarity score into [-1, 1]."""
    return max(-1.0, min(1.0, value))


def parse_similarity(text: str) -> Optional[float]:
    """
    Extract a similarity score from a free-text oracle reply.

    Returns the first number found, clamped to [-1, 1], or None if the
    reply holds no finite number.
    """
    if not text:
        return None

    match = NUMBER_PATTERN.search(text)
    if not match:
        return None

    value = float(match.group(0))
    if not math.isfinite(value):
        return None

    return clamp_similarity(value)
