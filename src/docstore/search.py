"""Weighted fuzzy search over pages.

The index is rebuilt from the given pages on every call; the corpus is small
(tens to hundreds of pages) so nothing is cached or persisted.

Scoring, per page:
    field score  = mean over query tokens of the best partial-ratio match in
                   that field (0..1; tags take the best tag). Values shorter
                   than the token are compared whole, and values shorter than
                   the minimum match length are skipped
    field counts = field score >= 1 - threshold
    relevance    = sum(weight * field score) over counting fields

Pages with no counting field are dropped. Results are best-first with ties
kept in input order.
"""

from __future__ import annotations

import html
import re
from typing import TYPE_CHECKING

import numpy as np
from rapidfuzz import fuzz
from rapidfuzz.utils import default_process

from docstore.config import SearchConfig

if TYPE_CHECKING:
    from collections.abc import Sequence

    from docstore.models import Page

FIELDS = ("title", "description", "content", "tags")

_TAG_RE = re.compile(r"<[^>]+>")


def _plain(text: str) -> str:
    """Drop markup from rich-text content so tag names don't match queries."""
    return html.unescape(_TAG_RE.sub(" ", text))


def _tokens(query: str, min_len: int) -> list[str]:
    return [t for t in default_process(query).split() if len(t) >= min_len]


def _similarity(tok: str, value: str) -> float:
    """Partial alignment only when the value can contain the whole token."""
    if len(value) >= len(tok):
        return fuzz.partial_ratio(tok, value)
    return fuzz.ratio(tok, value)


def _field_score(tokens: list[str], values: Sequence[str], min_len: int) -> float:
    processed = [v for v in (default_process(v) for v in values) if len(v) >= min_len]
    if not processed:
        return 0.0
    per_token = [max(_similarity(tok, v) for v in processed) / 100.0 for tok in tokens]
    return float(np.mean(per_token))


def score_matrix(pages: Sequence[Page], tokens: list[str], min_len: int = 2) -> np.ndarray:
    """Return an (n_pages, 4) array of field scores in FIELDS order.

    Field values shorter than min_len never match.
    """
    scores = np.zeros((len(pages), len(FIELDS)), dtype=np.float64)
    for i, page in enumerate(pages):
        scores[i, 0] = _field_score(tokens, [page.title], min_len)
        scores[i, 1] = _field_score(tokens, [page.description], min_len)
        scores[i, 2] = _field_score(tokens, [_plain(page.content)], min_len)
        scores[i, 3] = _field_score(tokens, page.tags, min_len)
    return scores


def rank_pages(
    pages: Sequence[Page],
    query: str,
    cfg: SearchConfig | None = None,
) -> list[tuple[Page, float]]:
    """Return (page, relevance) pairs, best first. Empty for a blank query."""
    cfg = cfg or SearchConfig()
    tokens = _tokens(query, cfg.min_match_length)
    if not pages or not tokens:
        return []

    scores = score_matrix(pages, tokens, cfg.min_match_length)
    matched = scores >= (1.0 - cfg.threshold)
    relevance = (scores * matched) @ np.asarray(cfg.weights, dtype=np.float64)

    keep = np.flatnonzero(matched.any(axis=1))
    order = keep[np.argsort(-relevance[keep], kind="stable")]
    return [(pages[i], float(relevance[i])) for i in order]


def search_pages(
    pages: Sequence[Page],
    query: str,
    cfg: SearchConfig | None = None,
) -> list[Page]:
    """Filter and rank pages by query. A blank query returns every page unranked."""
    if not query.strip():
        return list(pages)
    return [page for page, _ in rank_pages(pages, query, cfg)]
