"""
Canonical match ordering.

Every replay and streak scan walks matches by match date, then creation
timestamp, then identifier. This is a total order: two distinct matches
never compare equal, so results never depend on input order.
"""


def match_sort_key(match):
    return (match.match_date, match.created_at, match.id)


def order_matches(matches) -> list:
    """Return a new list in canonical order; the input is left untouched."""
    return sorted(matches, key=match_sort_key)
