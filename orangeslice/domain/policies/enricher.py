# orangeslice/domain/policies/enricher.py
from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from orangeslice.common.logging import get_logger
from orangeslice.domain.entities.tag import Tag
from orangeslice.domain.entities.links.entry_tag_link import EntryTag, EnrichedEntryTag

logger = get_logger(__name__)


class RelationshipEnricher:
    """
    Joins raw entry/tag links against a cached tag index.

    The index is rebuilt only when the tag collection changes (`refresh_tags`),
    so enriching a push costs one dict lookup per link instead of one remote
    call per link.
    """

    def __init__(self, tags: Optional[Iterable[Tag]] = None) -> None:
        self._lock = threading.Lock()
        self._by_id: Dict[UUID, Tag] = {}
        if tags is not None:
            self.refresh_tags(tags)

    def refresh_tags(self, tags: Iterable[Tag]) -> None:
        index = {t.id: t for t in tags}
        with self._lock:
            self._by_id = index

    def tag(self, tag_id: UUID) -> Optional[Tag]:
        with self._lock:
            return self._by_id.get(tag_id)

    @property
    def known_tag_ids(self) -> set[UUID]:
        with self._lock:
            return set(self._by_id)

    def enrich(self, links: Iterable[EntryTag]) -> List[EnrichedEntryTag]:
        """One enriched record per link whose tag is known; the rest are dropped and logged."""
        with self._lock:
            index = self._by_id

        out: List[EnrichedEntryTag] = []
        dropped = 0
        for link in links:
            tag = index.get(link.tag_id)
            if tag is None:
                dropped += 1
                logger.warning("Dropping link %s: tag %s is not known", link.id, link.tag_id)
                continue
            out.append(
                EnrichedEntryTag(
                    id=link.id,
                    entry_id=link.entry_id,
                    tag_id=link.tag_id,
                    tag_name=tag.name,
                    tag_color=tag.color,
                )
            )
        if dropped:
            logger.debug("Enriched %d links, dropped %d", len(out), dropped)
        return out
