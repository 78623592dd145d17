"""Fuzzy subsequence matcher used to filter and rank picker candidates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from rapidfuzz.distance import LCSseq

from mp_picker.models import Candidate

SEPARATORS = frozenset("-_/ ")


@dataclass(frozen=True, order=True)
class MatchScore:
    """Comparable match quality; higher sorts first.

    Field order is the ranking priority: contiguous substring, word-boundary
    start, tight span (negated gap count), short label (negated length).
    """

    contiguous: bool = False
    boundary: bool = False
    tightness: int = 0
    brevity: int = 0


UNIFORM_SCORE = MatchScore()


@dataclass(frozen=True)
class Match:
    candidate: Candidate
    score: MatchScore


def is_subsequence(query: str, label: str) -> bool:
    """Case-insensitive ordered subsequence test."""
    if not query:
        return True
    q = query.lower()
    if len(q) > len(label):
        return False
    return LCSseq.similarity(q, label.lower(), score_cutoff=len(q)) == len(q)


def _is_boundary(label: str, pos: int) -> bool:
    return pos == 0 or label[pos - 1] in SEPARATORS


def _greedy_end(query: str, label: str, start: int) -> int:
    """Index of the last matched char when matching greedily from ``start``, or -1."""
    qi = 0
    for li in range(start, len(label)):
        if label[li] == query[qi]:
            qi += 1
            if qi == len(query):
                return li
    return -1


def score_label(query: str, label: str) -> MatchScore | None:
    """Score ``label`` against ``query``; None when it does not match."""
    if not query:
        return UNIFORM_SCORE
    if not is_subsequence(query, label):
        return None

    q = query.lower()
    text = label.lower()
    brevity = -len(label)

    first = text.find(q)
    if first != -1:
        boundary = False
        pos = first
        while pos != -1:
            if _is_boundary(text, pos):
                boundary = True
                break
            pos = text.find(q, pos + 1)
        return MatchScore(contiguous=True, boundary=boundary, tightness=0, brevity=brevity)

    best_span: int | None = None
    boundary = False
    for start, ch in enumerate(text):
        if ch != q[0]:
            continue
        end = _greedy_end(q, text, start)
        if end == -1:
            # No later start can succeed either.
            break
        span = end - start + 1
        if best_span is None or span < best_span:
            best_span = span
        if _is_boundary(text, start):
            boundary = True
    gaps = (best_span or len(q)) - len(q)
    return MatchScore(contiguous=False, boundary=boundary, tightness=-gaps, brevity=brevity)


def match(query: str, candidates: Sequence[Candidate]) -> list[Match]:
    """Filter ``candidates`` to those matching ``query`` and rank them.

    An empty query keeps every candidate in its original order. Otherwise
    non-matching candidates are dropped and the rest are sorted by descending
    score; equal scores keep their input order.
    """
    if not query:
        return [Match(candidate, UNIFORM_SCORE) for candidate in candidates]

    matches: list[Match] = []
    for candidate in candidates:
        score = score_label(query, candidate.label)
        if score is not None:
            matches.append(Match(candidate, score))
    # sorted() is stable with reverse=True, so ties keep input order.
    return sorted(matches, key=lambda m: m.score, reverse=True)
