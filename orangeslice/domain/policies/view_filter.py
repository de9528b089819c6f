# orangeslice/domain/policies/view_filter.py
"""
Pure derivations over the locally mirrored collections. Nothing here touches
I/O or mutates its inputs, so calling twice with the same inputs gives the
same answer.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Set
from uuid import UUID

from orangeslice.domain.entities.entry import Entry
from orangeslice.domain.entities.links.entry_tag_link import EnrichedEntryTag


def tag_ids_by_entry(associations: Iterable[EnrichedEntryTag]) -> Dict[UUID, Set[UUID]]:
    out: Dict[UUID, Set[UUID]] = {}
    for a in associations:
        out.setdefault(a.entry_id, set()).add(a.tag_id)
    return out


def tag_names_for(entry_id: UUID, associations: Iterable[EnrichedEntryTag]) -> List[str]:
    """Tag names linked to one entry, in association order, without repeats."""
    names: List[str] = []
    for a in associations:
        if a.entry_id == entry_id and a.tag_name not in names:
            names.append(a.tag_name)
    return names


def filter_entries(
    entries: Sequence[Entry],
    associations: Sequence[EnrichedEntryTag],
    search: str | None,
    selected_tag_ids: Iterable[UUID],
) -> List[Entry]:
    """
    Visible entries, in the order of `entries`.

    An entry is visible when its name contains `search` (case-insensitive,
    empty search matches all) AND it is linked to EVERY selected tag
    (empty selection matches all). An entry with no links therefore never
    survives a non-empty tag selection.
    """
    wanted = set(selected_tag_ids)
    linked = tag_ids_by_entry(associations) if wanted else {}

    out: List[Entry] = []
    for e in entries:
        if not e.name_matches(search or ""):
            continue
        if wanted and not wanted <= linked.get(e.id, set()):
            continue
        out.append(e)
    return out
