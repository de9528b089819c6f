# orangeslice/services/catalog/page.py
from __future__ import annotations

from typing import Iterable, List, Optional
from uuid import UUID

from orangeslice.common.strings.splitters import dedupe_keep_order
from orangeslice.domain.enums import CatalogStatus, EmptyStateKind
from orangeslice.domain.policies.view_filter import filter_entries, tag_names_for
from orangeslice.services.mirror.local_mirror import MirrorSnapshot
from orangeslice.services.schemas.catalog import ActiveFilters, CatalogPage, EmptyState, EntryCard
from orangeslice.services.schemas.tags import TagOption

UNNAMED = "Unnamed Project"
NO_ENTRIES_MESSAGE = "No demos available yet. Check back soon!"
NO_MATCHES_MESSAGE = "No projects match your current filters."


def count_label(n: int) -> str:
    return f"{n} Project{'' if n == 1 else 's'}"


def _filter_detail(search: str, tag_count: int) -> Optional[str]:
    parts: List[str] = []
    if search:
        parts.append(f'Search: "{search}"')
    if tag_count:
        parts.append(f"{tag_count} tag filter(s) active")
    return " • ".join(parts) or None


def build_catalog_page(
    snap: MirrorSnapshot,
    search: Optional[str] = None,
    selected_tag_ids: Iterable[UUID] = (),
    *,
    placeholder_image_url: str,
) -> CatalogPage:
    """Derive the public catalog view from one consistent mirror snapshot."""
    search = search or ""
    selected: List[UUID] = dedupe_keep_order(selected_tag_ids)

    options = [
        TagOption(id=t.id, name=t.name, color=t.color, selected=t.id in selected)
        for t in snap.tags
    ]
    active = ActiveFilters(search=search or None, tag_count=len(selected)) if (search or selected) else None

    if not snap.loaded:
        return CatalogPage(
            status=CatalogStatus.loading,
            search=search,
            selected_tag_ids=selected,
            available_tags=options,
            active_filters=active,
        )

    visible = filter_entries(snap.entries, snap.associations, search, selected)
    cards = [
        EntryCard(
            id=e.id,
            name=e.name or UNNAMED,
            github_link=e.github_link,
            project_link=e.project_link,
            image_url=e.image_url or placeholder_image_url,
            tag_names=tag_names_for(e.id, snap.associations),
        )
        for e in visible
    ]

    empty: Optional[EmptyState] = None
    if not snap.entries:
        empty = EmptyState(kind=EmptyStateKind.no_entries, message=NO_ENTRIES_MESSAGE)
    elif not cards:
        empty = EmptyState(
            kind=EmptyStateKind.no_matches,
            message=NO_MATCHES_MESSAGE,
            detail=_filter_detail(search, len(selected)),
        )

    return CatalogPage(
        status=CatalogStatus.ready,
        last_error=snap.last_error,
        total_count=len(snap.entries),
        visible_count=len(cards),
        count_label=count_label(len(cards)),
        search=search,
        selected_tag_ids=selected,
        available_tags=options,
        active_filters=active,
        entries=cards,
        empty_state=empty,
    )
