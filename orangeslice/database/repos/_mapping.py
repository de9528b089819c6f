# orangeslice/database/repos/_mapping.py
from __future__ import annotations
from orangeslice.database.models.catalog import Entry as DBEntry
from orangeslice.database.models.taxonomy import Tag as DBTag, EntryTag as DBEntryTag
from orangeslice.domain.entities.entry import Entry as DomainEntry
from orangeslice.domain.entities.tag import Tag as DomainTag
from orangeslice.domain.entities.links.entry_tag_link import EntryTag as DomainEntryTag


def to_domain_entry(row: DBEntry) -> DomainEntry:
    return DomainEntry(
        id=row.id,
        name=row.name,
        github_link=row.github_link,
        project_link=row.project_link,
        image_url=row.image_url,
        date_created=getattr(row, "date_created", None),
        last_updated=getattr(row, "last_updated", None),
    )


def to_domain_tag(row: DBTag) -> DomainTag:
    return DomainTag(id=row.id, name=row.name, color=row.color)


def to_domain_entry_tag(row: DBEntryTag) -> DomainEntryTag:
    return DomainEntryTag(id=row.id, entry_id=row.entry_id, tag_id=row.tag_id)
