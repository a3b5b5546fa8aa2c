"""Starting-word categories and oracle prompt templates."""

import random
from typing import Optional

# Categories the starting word is drawn from
CATEGORIES = [
    'space',
    'ocean',
    'mythology',
    'science',
    'art',
    'history',
    'food',
    'technology',
]

RANDOM_WORD_PROMPT = (
    "Give me one interesting noun from the category '{category}'. "
    "Reply with the single word only, with no explanation, quotes or punctuation."
)

SIMILARITY_PROMPT = (
    'Calculate the cosine similarity between the words "{first}" and "{second}". '
    "Reply with only a floating point number between -1 and 1 (for example 0.7543) "
    "and no other text."
)


def get_random_category(rng: Optional[random.Random] = None) -> str:
    """Pick a random starting-word category."""
    return (rng or random).choice(CATEGORIES)


def build_random_word_prompt(category: str) -> str:
    return RANDOM_WORD_PROMPT.format(category=category)


def build_similarity_prompt(first: str, second: str) -> str:
    return SIMILARITY_PROMPT.format(first=first, second=second)
