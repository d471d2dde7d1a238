"""
Spelling helpers for selection matching and fault hints.

- distance(a, b): weighted Damerau-Levenshtein distance. A case change costs
  1, an insertion or deletion 10, a swap of neighbours 10 and a substitution
  20, so 'hlep' is closer to 'help' than 'halp' is.
- rank(word, names): names paired with their distance, closest first.
- correct(word, names): the best ranked name within MAX_EDIT_DISTANCE, or None.
- suggest(word, names): difflib close matches, used for "did you mean" hints.
"""
import difflib
from collections import namedtuple

CASE_CHANGE_COST = 1
INSERTION_COST = 10
DELETION_COST = 10
SWAP_COST = 10
SUBSTITUTION_COST = 20
MAX_EDIT_DISTANCE = 40

Ranked = namedtuple("Ranked", ("name", "distance"))


def distance(first, second, /):
    # three rows of the dynamic programming matrix are enough with swaps
    before = [0] * (len(first) + 1)
    previous = [index * INSERTION_COST for index in range(len(first) + 1)]
    current = [0] * (len(first) + 1)

    for j in range(1, len(second) + 1):
        current[0] = j * INSERTION_COST
        for i in range(1, len(first) + 1):
            if first[i - 1] == second[j - 1]:
                cost = 0
            elif first[i - 1].lower() == second[j - 1].lower():
                cost = CASE_CHANGE_COST
            else:
                cost = SUBSTITUTION_COST
            current[i] = min(
                current[i - 1] + DELETION_COST,
                previous[i] + INSERTION_COST,
                previous[i - 1] + cost,
            )
            if i > 1 and j > 1 and first[i - 1] == second[j - 2] and second[j - 1] == first[i - 2]:
                current[i] = min(current[i], before[i - 2] + SWAP_COST)
        before, previous, current = previous, current, before

    return previous[len(first)]


def correct(word, names, /):
    """
    The name closest to word, ties broken alphabetically.

    Returns None when there are no names or the best is further than
    MAX_EDIT_DISTANCE.
    """
    if not names:
        return None
    best = rank(word, sorted(names))[0]
    return best.name if best.distance <= MAX_EDIT_DISTANCE else None


def rank(word, names, /, *, sort=True):
    ranked = [Ranked(name, distance(word, name)) for name in names]
    if sort:
        ranked.sort(key=lambda entry: entry.distance)
    return ranked


def suggest(word, names, /, limit=5):
    return difflib.get_close_matches(word, list(names), limit)


__all__ = (
    "MAX_EDIT_DISTANCE",
    "Ranked",
    "distance",
    "correct",
    "rank",
    "suggest",
)
