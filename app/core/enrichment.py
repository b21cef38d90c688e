"""
Lookup indices and foreign-key enrichment.

A primary record (a stock-out entry, a dead-stock report, ...) carries ids of
users, items, departments and so on. ``enrich_record`` resolves them through
in-memory indices into display fields, writing a fixed fallback label when a
key is missing or unknown. Enrichment never raises.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from app.core.normalize import FIELD_ALIASES, first_present, is_present, reference_id

Index = Dict[Hashable, Dict[str, Any]]
Display = Union[str, Callable[[Mapping[str, Any]], Any]]

UNKNOWN_USER = "Unknown User"
UNKNOWN_ITEM = "Unknown Item"
UNKNOWN_SUPPLIER = "Unknown Supplier"
UNKNOWN_ROLE = "Unknown"
NOT_AVAILABLE = "N/A"


def build_index(records: Iterable[Mapping[str, Any]], key: str = "_id") -> Index:
    """Map each record's identifier to the record. Later duplicates win."""
    index: Index = {}
    for record in records:
        record_id = record.get(key)
        if not is_present(record_id) or not isinstance(record_id, Hashable):
            continue
        index[record_id] = dict(record)
    return index


@dataclass(frozen=True)
class ResolutionRule:
    """Resolve ``foreign_key`` through ``index`` into ``output_field``.

    ``display`` names the attribute of the referenced record to show, or is a
    callable computing it. With ``fallback_to_key`` an unresolved but present
    key is shown as-is instead of the fallback label.
    """
    foreign_key: str
    index: str
    output_field: str
    fallback: str = NOT_AVAILABLE
    display: Display = "name"
    fallback_to_key: bool = False

    @property
    def aliases(self) -> Tuple[str, ...]:
        return FIELD_ALIASES.get(self.foreign_key, (self.foreign_key,))


def read_foreign_key(record: Mapping[str, Any], aliases: Sequence[str]) -> Optional[Any]:
    """Read a reference, trying every alias in order."""
    return reference_id(first_present(record, aliases))


def _display_value(target: Mapping[str, Any], display: Display) -> Optional[str]:
    if callable(display):
        value = display(target)
    else:
        value = target.get(display)
    if not is_present(value):
        return None
    return value if isinstance(value, str) else str(value)


def resolve(record: Mapping[str, Any], rule: ResolutionRule, indices: Mapping[str, Index]) -> str:
    key = read_foreign_key(record, rule.aliases)
    if key is None:
        return rule.fallback

    index = indices.get(rule.index) or {}
    try:
        target = index.get(key)
    except TypeError:
        # unhashable key
        return rule.fallback

    if target is not None:
        value = _display_value(target, rule.display)
        if value is not None:
            return value

    if rule.fallback_to_key:
        return str(key)
    return rule.fallback


def enrich_record(
    record: Mapping[str, Any],
    indices: Mapping[str, Index],
    rules: Sequence[ResolutionRule],
) -> Dict[str, Any]:
    """Return a copy of ``record`` with every rule's output field filled."""
    enriched = dict(record)
    for rule in rules:
        enriched[rule.output_field] = resolve(record, rule, indices)
    return enriched


def enrich_records(
    records: Iterable[Mapping[str, Any]],
    indices: Mapping[str, Index],
    rules: Sequence[ResolutionRule],
) -> List[Dict[str, Any]]:
    return [enrich_record(record, indices, rules) for record in records]
