"""
In-memory search over courses, resources and learning paths.

Ranking:
- tier 0: the query equals the title (case-insensitive, trimmed)
- tier 1: the query occurs in one of the tags
- tier 2: the query occurs in the title, summary/description, instructors or audience
Within a tier hits are ordered by BM25 relevance, then entity kind, then id.
Hits are de-duplicated by (kind, id); the best tier wins.

SearchDebouncer mirrors the client-side behaviour: each submitted query cancels
the pending computation of the previous one and only the latest result is
delivered.
"""
from __future__ import annotations

import asyncio
import html
import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

from rank_bm25 import BM25Okapi  # type: ignore

from core.config import get_settings
from schemas.api import EntityKind, SearchHit, SearchResults
from schemas.course import Course
from schemas.learning_path import LearningPath
from schemas.resource import Resource

logger = logging.getLogger("search")

TIER_TITLE = 0
TIER_TAG = 1
TIER_TEXT = 2
_TIER_MATCH = {TIER_TITLE: "title", TIER_TAG: "tag", TIER_TEXT: "text"}
_KIND_ORDER = {"course": 0, "resource": 1, "learning_path": 2}

# latin words and digits as tokens, CJK ideographs one per token
_TOKEN_RE = re.compile(r"[a-z0-9]+|[\u3400-\u4dbf\u4e00-\u9fff]")

Entity = Union[Course, Resource, LearningPath]


def tokenize(text: str) -> List[str]:
    if not text:
        return []
    return _TOKEN_RE.findall(text.lower())


@dataclass(frozen=True)
class _Document:
    kind: EntityKind
    id: str
    title: str
    tags: Tuple[str, ...]
    text: str
    item: Entity


def _to_document(kind: EntityKind, item: Entity) -> _Document:
    if isinstance(item, Course):
        parts = [item.title, item.summary, " ".join(item.instructors)]
        tags = tuple(item.tags)
    elif isinstance(item, Resource):
        parts = [item.title, item.description]
        tags = tuple(item.tags)
    else:
        parts = [item.title, item.description, item.recommended_audience]
        tags = ()
    return _Document(kind=kind, id=item.id, title=item.title, tags=tags, text=" ".join(parts), item=item)


class SearchIndex:
    def __init__(
        self,
        courses: Sequence[Course] = (),
        resources: Sequence[Resource] = (),
        learning_paths: Sequence[LearningPath] = (),
    ) -> None:
        self._docs: List[_Document] = []
        self._bm25: Optional[BM25Okapi] = None
        self.update_data(courses, resources, learning_paths)

    def update_data(
        self,
        courses: Sequence[Course] = (),
        resources: Sequence[Resource] = (),
        learning_paths: Sequence[LearningPath] = (),
    ) -> None:
        docs: List[_Document] = []
        seen = set()
        for kind, items in (("course", courses), ("resource", resources), ("learning_path", learning_paths)):
            for item in items:
                key = (kind, item.id)
                if key in seen:
                    continue
                seen.add(key)
                docs.append(_to_document(kind, item))  # type: ignore[arg-type]
        self._docs = docs

        corpus = [tokenize(f"{d.title} {' '.join(d.tags)} {d.text}") for d in docs]
        # BM25Okapi divides by the average document length
        self._bm25 = BM25Okapi(corpus) if any(corpus) else None
        logger.debug("search index built", extra={"count": len(docs)})

    def __len__(self) -> int:
        return len(self._docs)

    @staticmethod
    def _tier(doc: _Document, needle: str) -> Optional[int]:
        if doc.title.strip().lower() == needle:
            return TIER_TITLE
        if any(needle in tag.lower() for tag in doc.tags):
            return TIER_TAG
        if needle in doc.title.lower() or needle in doc.text.lower():
            return TIER_TEXT
        return None

    def _scores(self, query: str) -> List[float]:
        tokens = tokenize(query)
        if self._bm25 is None or not tokens:
            return [0.0] * len(self._docs)
        return [float(s) for s in self._bm25.get_scores(tokens)]

    def search(self, query: str) -> SearchResults:
        needle = (query or "").strip().lower()
        if not needle:
            return SearchResults(query=query or "")

        scores = self._scores(needle)
        best: Dict[Tuple[str, str], SearchHit] = {}
        for doc, score in zip(self._docs, scores):
            tier = self._tier(doc, needle)
            if tier is None:
                continue
            key = (doc.kind, doc.id)
            current = best.get(key)
            if current is not None and current.tier <= tier:
                continue
            best[key] = SearchHit(
                kind=doc.kind,
                id=doc.id,
                title=doc.title,
                tier=tier,
                match=_TIER_MATCH[tier],
                score=round(score, 6),
                item=doc.item,
            )

        hits = sorted(best.values(), key=lambda h: (h.tier, -h.score, _KIND_ORDER[h.kind], h.id))
        logger.info("search completed", extra={"query": query, "hits": len(hits)})
        return SearchResults(
            query=query,
            hits=hits,
            courses=[h for h in hits if h.kind == "course"],
            resources=[h for h in hits if h.kind == "resource"],
            learning_paths=[h for h in hits if h.kind == "learning_path"],
            total_count=len(hits),
        )

    def export_documents(self) -> List[Dict[str, object]]:
        """Flat, serialisable view of the index for client-side search."""
        return [
            {"kind": d.kind, "id": d.id, "title": d.title, "tags": list(d.tags), "text": d.text}
            for d in self._docs
        ]


class SearchDebouncer:
    """Debounced query handling: a new query cancels the pending one."""

    def __init__(self, index: SearchIndex, delay_ms: Optional[int] = None) -> None:
        if delay_ms is None:
            delay_ms = get_settings().search_debounce_ms
        self._index = index
        self._delay = delay_ms / 1000.0
        self._pending: Optional[asyncio.Task] = None
        self.latest: Optional[SearchResults] = None

    async def _run(self, query: str) -> SearchResults:
        await asyncio.sleep(self._delay)
        results = self._index.search(query)
        self.latest = results
        return results

    async def submit(self, query: str) -> Optional[SearchResults]:
        """Return the results for ``query``, or None if a newer query superseded it."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        task = asyncio.ensure_future(self._run(query))
        self._pending = task
        await asyncio.wait({task})
        if task.cancelled():
            return None
        return task.result()

    def cancel(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()


def highlight_matches(text: str, query: str, tag: str = "mark") -> str:
    """Escape ``text`` and wrap case-insensitive occurrences of ``query``."""
    if not text:
        return text
    needle = (query or "").strip()
    if not needle:
        return html.escape(text)
    pattern = re.compile(re.escape(needle), re.IGNORECASE)
    out = []
    last = 0
    for m in pattern.finditer(text):
        out.append(html.escape(text[last:m.start()]))
        out.append(f"<{tag}>{html.escape(m.group(0))}</{tag}>")
        last = m.end()
    out.append(html.escape(text[last:]))
    return "".join(out)
