"""Subsequence fuzzy matching used by the session picker.

Lower scores are better. Consecutive matches and matches at word boundaries
are rewarded; gaps between matches are penalised, and a small position term
makes earlier matches edge out later ones.
"""

from __future__ import annotations

_BOUNDARY_CHARS = frozenset(" \t\n-_./:")
_DIGITS = frozenset("0123456789")


def _is_alpha(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def _is_digit(ch: str) -> bool:
    return ch in _DIGITS


def _score_pass(query: str, text: str) -> float | None:
    if not query:
        return 0.0
    if len(query) > len(text):
        return None

    qi = 0
    score = 0.0
    last_match: int | None = None
    consecutive = 0

    for i, ch in enumerate(text):
        if qi == len(query):
            break
        if ch != query[qi]:
            continue
        is_boundary = i == 0 or text[i - 1] in _BOUNDARY_CHARS
        if last_match is not None and last_match == max(i - 1, 0):
            consecutive += 1
            score -= consecutive * 5
        else:
            consecutive = 0
            if last_match is not None:
                score += (i - last_match - 1) * 2
        if is_boundary:
            score -= 10.0
        score += i * 0.1
        last_match = i
        qi += 1

    return score if qi == len(query) else None


def _swap_split(query: str, head_ok, tail_ok) -> str | None:
    idx = next((i for i, ch in enumerate(query) if tail_ok(ch)), None)
    if idx is None or idx == 0:
        return None
    head, tail = query[:idx], query[idx:]
    if all(head_ok(ch) for ch in head) and all(tail_ok(ch) for ch in tail):
        return tail + head
    return None


def _swap_alpha_numeric(query: str) -> str | None:
    """Swap a letters+digits query into digits+letters, or the reverse."""
    if not query:
        return None
    swapped = _swap_split(query, _is_alpha, _is_digit)
    if swapped is not None:
        return swapped
    return _swap_split(query, _is_digit, _is_alpha)


def fuzzy_score(query: str, text: str) -> float | None:
    """Score ``query`` as a case-insensitive subsequence of ``text``.

    Returns None when the query cannot be matched in order. Queries such as
    ``v2`` are retried as ``2v`` (and vice versa) with a small penalty.
    """
    q = query.lower()
    t = text.lower()
    score = _score_pass(q, t)
    if score is not None:
        return score
    swapped = _swap_alpha_numeric(q)
    if swapped is None:
        return None
    score = _score_pass(swapped, t)
    return None if score is None else score + 5.0