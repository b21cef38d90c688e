"""
The enrich-and-filter view model shared by every list page.

A ``ListingSpec`` names the page's primary collection, the lookup collections
it joins against, the resolution rules, the searchable fields and the dropdown
filters. ``build_listing`` fetches everything concurrently, indexes the
lookups, enriches the primary records and applies the current search and
selections.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from app.core.backend import BackendClient
from app.core.enrichment import Index, ResolutionRule, build_index, enrich_records
from app.core.exceptions import BackendUnavailableError
from app.core.filtering import CategoricalFilter, filter_options, static_options
from app.core.logging_config import get_logger
from app.core.resources import Resource
from app.core.view_state import ListView
from app.models.listing import ListingResponse

logger = get_logger(__name__)


@dataclass(frozen=True)
class ListingSpec:
    title: str
    primary: Resource
    lookups: Mapping[str, Resource] = field(default_factory=dict)
    rules: Sequence[ResolutionRule] = ()
    search_fields: Sequence[str] = ()
    filters: Sequence[CategoricalFilter] = ()
    # param -> fixed vocabulary
    fixed_options: Mapping[str, Sequence[str]] = field(default_factory=dict)
    # param -> lookup whose record names form the options
    lookup_options: Mapping[str, str] = field(default_factory=dict)
    include: Optional[Callable[[Mapping[str, Any]], bool]] = None
    summarize: Optional[Callable[[List[Dict[str, Any]]], Dict[str, Any]]] = None


@dataclass
class LoadedListing:
    view: ListView
    indices: Dict[str, Index]
    lookup_records: Dict[str, List[Dict[str, Any]]]


async def load_listing(client: BackendClient, listing: ListingSpec) -> LoadedListing:
    """Fetch and enrich a page's records.

    The primary collection failing on every endpoint puts the page in its
    error state; a failing lookup only degrades enrichment to fallbacks.
    """
    view = ListView(listing.search_fields, listing.filters)
    view.start_loading()

    primary, *lookup_results = await client.fetch_collections(listing.primary, *listing.lookups.values())

    if not primary.ok:
        message = f"Failed to fetch {listing.title}"
        view.failed(message)
        logger.error(f"{message}: {primary.error}")
        raise BackendUnavailableError(
            message,
            error_code="LIST_LOAD_FAILED",
            details={"resource": primary.resource, "reason": primary.error},
        )

    indices: Dict[str, Index] = {}
    lookup_records: Dict[str, List[Dict[str, Any]]] = {}
    for name, result in zip(listing.lookups, lookup_results):
        if not result.ok:
            logger.warning(f"Lookup '{name}' unavailable for {listing.title}: {result.error}")
        indices[name] = build_index(result.records)
        lookup_records[name] = result.records

    records = primary.records
    if listing.include is not None:
        records = [r for r in records if listing.include(r)]

    view.loaded(enrich_records(records, indices, listing.rules))
    return LoadedListing(view=view, indices=indices, lookup_records=lookup_records)


def listing_options(listing: ListingSpec, loaded: LoadedListing) -> Dict[str, List[str]]:
    options: Dict[str, List[str]] = {}
    for f in listing.filters:
        if f.param in listing.fixed_options:
            options[f.param] = static_options(listing.fixed_options[f.param], f.sentinel)
        elif f.param in listing.lookup_options:
            lookup = loaded.lookup_records.get(listing.lookup_options[f.param], [])
            options[f.param] = filter_options(lookup, "name", f.sentinel)
        else:
            options[f.param] = filter_options(loaded.view.records, f.field, f.sentinel)
    return options


async def build_listing(
    client: BackendClient,
    listing: ListingSpec,
    search: Optional[str] = None,
    selections: Optional[Mapping[str, Optional[str]]] = None,
) -> ListingResponse:
    loaded = await load_listing(client, listing)
    view = loaded.view
    view.search(search)
    for param, value in (selections or {}).items():
        view.select(param, value)

    visible = view.visible
    return ListingResponse(
        status=view.status.value,
        records=visible,
        total=len(view.records),
        matched=len(visible),
        options=listing_options(listing, loaded),
        summary=listing.summarize(view.records) if listing.summarize else {},
    )
