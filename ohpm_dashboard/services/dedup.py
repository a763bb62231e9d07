from typing import Iterable, List


def split_unique(value: str | None) -> List[str]:
    """Split a comma separated list into trimmed, non-empty, unique entries.

    First-seen order is kept.
    """
    if not value:
        return []
    return unique(part.strip() for part in value.split(","))


def unique(items: Iterable[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for item in items:
        if not item or item in seen:
            continue
        seen.add(item)
        out.append(item)
    return out
