# orangeslice/services/catalog/entries.py
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from orangeslice.domain.policies.enricher import RelationshipEnricher
from orangeslice.domain.policies.view_filter import tag_names_for
from orangeslice.domain.ports.gateway import DataGatewayPort
from orangeslice.services.schemas.entries import EntryRead, EntryWithTagsRead


def entries_with_tags(gateway: DataGatewayPort, entry_id: Optional[UUID] = None) -> List[EntryWithTagsRead]:
    """
    Entries straight from the gateway, each with its resolved tags. One query
    per collection; tags are joined in memory.
    """
    if entry_id is not None:
        found = gateway.entries.get(entry_id)
        rows = [found] if found is not None else []
        links = gateway.entry_tags.list({"entry_id": entry_id}) if rows else []
    else:
        rows = gateway.entries.list()
        links = gateway.entry_tags.list()
    if not rows:
        return []

    enriched = RelationshipEnricher(gateway.tags.list()).enrich(links)
    out: List[EntryWithTagsRead] = []
    for e in rows:
        base = EntryRead.model_validate(e)
        out.append(
            EntryWithTagsRead(
                **base.model_dump(),
                tag_ids=[a.tag_id for a in enriched if a.entry_id == e.id],
                tag_names=tag_names_for(e.id, enriched),
            )
        )
    return out
