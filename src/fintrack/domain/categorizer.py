"""Category suggestion from a user's past transactions.

A new description gets the category of the most similar description in the
user's history. Similarity is the better of a character-level
``difflib.SequenceMatcher`` ratio and word overlap, so both typos ("netflx")
and reordered words match.
"""

import re
from difflib import SequenceMatcher
from typing import Iterable, Optional

from fintrack.database.base import Database
from fintrack.domain.entities import CategorySuggestion

MIN_CONFIDENCE = 0.5
HISTORY_SIZE = 500


def normalize_description(description: str) -> str:
    """Lowercase, drop digits and punctuation, collapse whitespace."""
    text = re.sub(r"[\d\W_]+", " ", description.lower())
    return " ".join(text.split())


def similarity(a: str, b: str) -> float:
    """Similarity of two normalized descriptions in [0, 1]."""
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    ratio = SequenceMatcher(None, a, b).ratio()
    words_a, words_b = set(a.split()), set(b.split())
    overlap = len(words_a & words_b) / len(words_a | words_b)
    return max(ratio, overlap)


def suggest_category(
    description: str,
    history: Iterable[tuple[str, int, str]],
    min_confidence: float = MIN_CONFIDENCE,
) -> Optional[CategorySuggestion]:
    """Suggest a category for a description.

    Args:
        description: Description to categorize
        history: (description, category_id, category_name) of past transactions
        min_confidence: Scores below this yield no suggestion

    Returns:
        The best suggestion, or None when nothing is similar enough
    """
    target = normalize_description(description)
    if not target:
        return None

    best: Optional[CategorySuggestion] = None
    for past_description, category_id, category_name in history:
        score = similarity(target, normalize_description(past_description))
        if best is None or score > best.confidence:
            best = CategorySuggestion(
                category_id=category_id,
                category_name=category_name,
                confidence=round(score, 2),
            )
            if score == 1.0:
                break

    if best is None or best.confidence < min_confidence:
        return None
    return best


class CategorizerService:
    """Suggests categories using the acting user's transaction history."""

    def __init__(self, db: Database):
        """Initialize categorizer service.

        Args:
            db: Database instance
        """
        self.db = db

    def history(self, user_id: int) -> list[tuple[str, int, str]]:
        """The user's most recent transactions as (description, category_id, name).

        Transfers are left out since their category says nothing about the
        description.
        """
        names = {category.id: category.name for category in self.db.list_categories()}
        return [
            (txn.description, txn.category_id, names.get(txn.category_id, ""))
            for txn in self.db.list_transactions(user_id=user_id, limit=HISTORY_SIZE)
            if txn.transfer_id is None
        ]

    def suggest(self, user_id: int, description: str) -> Optional[CategorySuggestion]:
        """Suggest a category from the user's most recent transactions."""
        return suggest_category(description, self.history(user_id))
