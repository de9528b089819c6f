from typing import Hashable, Iterable, List, TypeVar

H = TypeVar("H", bound=Hashable)


def csv_to_list(v: str | List[str] | None) -> List[str]:
    if v is None:
        return []
    if isinstance(v, list):
        return [s.strip() for s in v if s and str(s).strip()]
    return [s.strip() for s in str(v).split(",") if s.strip()]


def dedupe_keep_order(values: Iterable[H]) -> List[H]:
    """Drop repeats while keeping first-seen order."""
    seen = set()
    out: List[H] = []
    for v in values:
        if v in seen:
            continue
        seen.add(v)
        out.append(v)
    return out
