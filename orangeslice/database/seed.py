# orangeslice/database/seed.py
from __future__ import annotations

from typing import List, Tuple

from orangeslice.common.logging import get_logger
from orangeslice.domain.entities.tag import Tag
from orangeslice.domain.ports.gateway import DataGatewayPort

logger = get_logger(__name__)

# The fixed, predefined tag set offered to administrators.
DEFAULT_TAGS: Tuple[Tuple[str, str], ...] = (
    ("Games", "#f89520"),
    ("ML", "#4caf50"),
    ("Analytics", "#2196f3"),
    ("M&E", "#9c27b0"),
    ("Generative AI", "#e91e63"),
)


def seed_default_tags(gateway: DataGatewayPort) -> List[Tag]:
    """Create any default tag that is missing (matched by name, case-insensitive). Returns the created tags."""
    existing = {t.name.strip().lower() for t in gateway.tags.list()}
    missing = [{"name": n, "color": c} for n, c in DEFAULT_TAGS if n.lower() not in existing]
    if not missing:
        return []
    created = gateway.tags.create_many(missing)
    logger.info("Seeded %d default tag(s)", len(created))
    return created
