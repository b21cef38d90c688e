"""Free-text search and dropdown filters over enriched records."""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence


@dataclass(frozen=True)
class CategoricalFilter:
    """Exact-match filter on one enriched field.

    ``param`` is the query parameter carrying the selection; ``sentinel`` is the
    "all" option that disables the filter.
    """
    param: str
    field: str
    sentinel: str

    def is_active(self, value: Optional[str]) -> bool:
        return bool(value) and value != self.sentinel


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def matches_search(record: Mapping[str, Any], search_text: str, fields: Sequence[str]) -> bool:
    """Case-insensitive substring match on any of ``fields``."""
    needle = search_text.lower()
    return any(needle in _as_text(record.get(field)).lower() for field in fields)


def filter_records(
    records: Iterable[Mapping[str, Any]],
    search_text: Optional[str] = None,
    search_fields: Sequence[str] = (),
    filters: Sequence[CategoricalFilter] = (),
    selections: Optional[Mapping[str, Optional[str]]] = None,
) -> List[Dict[str, Any]]:
    """Apply the search and every active dropdown filter (ANDed)."""
    selections = selections or {}
    active = [(f, selections.get(f.param)) for f in filters if f.is_active(selections.get(f.param))]

    filtered = []
    for record in records:
        if search_text and not matches_search(record, search_text, search_fields):
            continue
        if any(_as_text(record.get(f.field)) != value for f, value in active):
            continue
        filtered.append(dict(record))
    return filtered


def filter_options(records: Iterable[Mapping[str, Any]], field: str, sentinel: str) -> List[str]:
    """Dropdown options: the sentinel, then distinct values in first-seen order."""
    options = [sentinel]
    seen = {sentinel}
    for record in records:
        value = record.get(field)
        if value is None or value == "":
            continue
        text = _as_text(value)
        if text not in seen:
            seen.add(text)
            options.append(text)
    return options


def static_options(values: Iterable[str], sentinel: str) -> List[str]:
    return [sentinel, *[v for v in values if v != sentinel]]
