# bouncer_relay/api/negotiation.py
"""
Accept header negotiation for the translate endpoint.

Each offered type takes the quality of the most specific range that matches
it, so "text/*;q=0, */*" still excludes text/plain.
"""

from typing import List, Optional, Sequence, Tuple


def _parse_accept(header: str) -> List[Tuple[int, str, float]]:
    """Parse an Accept header into (position, media_range, quality)."""
    ranges = []
    for index, part in enumerate(header.split(",")):
        pieces = [p.strip() for p in part.split(";")]
        media = pieces[0].lower()
        if not media:
            continue

        quality = 1.0
        for param in pieces[1:]:
            name, _, value = param.partition("=")
            if name.strip() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0

        ranges.append((index, media, quality))
    return ranges


def _specificity(media_range: str, offered: str) -> int:
    """How specifically a range matches an offered type; -1 for no match."""
    if media_range == "*/*":
        return 0
    kind, _, sub = media_range.partition("/")
    offered_kind, _, _ = offered.partition("/")
    if sub == "*":
        return 1 if kind == offered_kind else -1
    return 2 if media_range == offered else -1


def negotiate(accept: Optional[str], offered: Sequence[str]) -> Optional[str]:
    """
    Pick the offered media type the client prefers.

    A missing or empty Accept header accepts anything, in which case the first
    offered type wins. Ties go to the range listed first in the header, then
    to offer order. Returns None when nothing offered is acceptable.
    """
    if not accept or not accept.strip():
        return offered[0] if offered else None

    ranges = _parse_accept(accept)
    best = None
    best_key = None

    for order, candidate in enumerate(offered):
        matches = [
            (_specificity(media, candidate), index, quality)
            for index, media, quality in ranges
        ]
        matches = [m for m in matches if m[0] >= 0]
        if not matches:
            continue

        # Most specific range decides; earliest in the header among equals
        specificity, index, quality = max(matches, key=lambda m: (m[0], -m[1]))
        if quality <= 0:
            continue

        key = (-quality, index, order)
        if best_key is None or key < best_key:
            best, best_key = candidate, key

    return best
