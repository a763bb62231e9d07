from typing import Any, Callable, Dict, List, Tuple

from ..schemas import PackageRecord


def _stars(record: PackageRecord) -> int:
    if not record.resolved or record.github_stats is None:
        return 0
    return record.github_stats.stars


def _resolved_value(attr: str) -> Callable[[PackageRecord], int]:
    def key(record: PackageRecord) -> int:
        return getattr(record, attr) if record.resolved else 0

    return key


# field -> (sort key, "asc" means reverse?)
SORT_FIELDS: Dict[str, Tuple[Callable[[PackageRecord], Any], bool]] = {
    "name": (lambda record: record.name, False),
    # newest first for "asc"
    "publishTime": (_resolved_value("publish_time_millis"), True),
    "ohpmLikes": (_resolved_value("likes"), False),
    "ohpmDownloads": (_resolved_value("downloads"), False),
    "githubStars": (_stars, False),
}
DEFAULT_SORT_FIELD = "name"
SORT_MODES = ("asc", "desc")


def sort_packages(records: List[PackageRecord], sort_field: str = "name", sort_mode: str = "asc") -> List[PackageRecord]:
    """Stable sort of ``records`` by one field.

    Unknown fields sort by name ascending whatever the mode; unknown modes
    count as "asc".
    """
    if sort_field not in SORT_FIELDS:
        key, reverse = SORT_FIELDS[DEFAULT_SORT_FIELD]
        return sorted(records, key=key, reverse=reverse)
    key, reverse = SORT_FIELDS[sort_field]
    if sort_mode == "desc":
        reverse = not reverse
    return sorted(records, key=key, reverse=reverse)
