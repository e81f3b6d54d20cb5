"""
Discovery pipeline over the listing corpus.

Everything here is pure and synchronous: callers hand in the latest snapshot
fetched from the store and get a freshly computed, ordered list back.
"""
from collections import Counter
from collections.abc import Iterable
from enum import Enum

from src.domain.discovery.filter_spec import FilterSpec, SortKey
from src.domain.entities.listing import Listing
from src.domain.enums.ad_status import AdStatus


def _attribute(listing: Listing, name: str) -> str:
    value = getattr(listing, name)
    return value.value if isinstance(value, Enum) else str(value)


def _matches_term(listing: Listing, term: str) -> bool:
    needle = term.lower()
    return needle in listing.title.lower() or needle in listing.description.lower()


def newest_first(listings: Iterable[Listing]) -> list[Listing]:
    """Order by descending created_at; equal timestamps keep input order."""
    return sorted(listings, key=lambda l: l.created_at, reverse=True)


def sort_listings(listings: Iterable[Listing], sort: SortKey) -> list[Listing]:
    if sort is SortKey.PRICE_ASC:
        return sorted(listings, key=lambda l: l.price)
    if sort is SortKey.PRICE_DESC:
        return sorted(listings, key=lambda l: l.price, reverse=True)
    return newest_first(listings)


def discover(listings: Iterable[Listing], spec: FilterSpec | None = None) -> list[Listing]:
    """Return the active listings matching spec, in the requested order."""
    spec = spec or FilterSpec()
    result = [l for l in listings if l.status is AdStatus.ACTIVE]

    if spec.term:
        result = [l for l in result if _matches_term(l, spec.term)]

    for name, expected in spec.exact_filters().items():
        result = [l for l in result if _attribute(l, name) == expected]

    low, high = spec.min_bound, spec.max_bound
    if low is not None:
        result = [l for l in result if l.price >= low]
    if high is not None:
        result = [l for l in result if l.price <= high]

    return sort_listings(result, spec.sort_key)


def filter_for_admin(
    listings: Iterable[Listing],
    *,
    term: str = "",
    status: AdStatus | None = None,
    owner_id: str | None = None,
) -> list[Listing]:
    """Moderator search across every status, newest first."""
    result = list(listings)
    if owner_id:
        result = [l for l in result if l.owner_id == owner_id]
    if term and not owner_id:
        needle = term.lower()
        result = [l for l in result if _matches_term(l, term) or needle in l.owner_id.lower()]
    elif term and term != owner_id:
        result = [l for l in result if _matches_term(l, term)]
    if status is not None:
        result = [l for l in result if l.status is status]
    return newest_first(result)


def status_summary(listings: Iterable[Listing]) -> dict[str, int]:
    counts = Counter(l.status for l in listings)
    summary = {status.value: counts.get(status, 0) for status in AdStatus}
    summary["total"] = sum(counts.values())
    return summary
