"""Search over a group's chart history.

A group's charts hold one row per entry per week, so a single artist, track
or album appears many times. Search collapses those rows into one canonical
hit per (chart type, entry key), keeping the most recent row.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from typing import TYPE_CHECKING, Protocol

from chartroom.models.group import CHART_TYPE_ALBUMS, CHART_TYPE_ARTISTS, CHART_TYPE_TRACKS
from chartroom.schemas.search import ArtistHit, ReleaseHit, SearchResults
from chartroom.services.errors import GroupAccessError, GroupNotFoundError
from chartroom.services.normalization import generate_slug, strip_accents

if TYPE_CHECKING:
    from chartroom.repositories.chart_entry_repo import ChartEntryRepository

logger = logging.getLogger(__name__)


class ChartRow(Protocol):
    chart_type: str
    entry_key: str
    name: str
    artist: str | None
    slug: str | None
    week_start: date


def collation_key(name: str) -> tuple[str, str]:
    """Sort key that orders names the way a reader expects.

    Case and accents are ignored at the first level ("Émile" sorts with
    "emile"); the raw string breaks ties so the order stays deterministic.
    """
    return strip_accents(name).casefold(), name


def deduplicate_chart_entries(rows: Iterable[ChartRow], search_term: str) -> SearchResults:
    """Collapse raw chart rows into name-sorted canonical hits.

    Only ``name`` is matched against ``search_term`` (case-insensitive
    substring); the secondary ``artist`` field is never searched. Rows are
    ordered newest week first before deduplicating so the surviving row for
    each key is the latest one, whatever order ``rows`` arrived in.
    """
    needle = search_term.strip().casefold()
    if not needle:
        return SearchResults()

    matching = [row for row in rows if needle in row.name.casefold()]
    # sorted() is stable, so rows from the same week keep their input order.
    matching = sorted(matching, key=lambda row: row.week_start, reverse=True)

    canonical: dict[tuple[str, str], ChartRow] = {}
    for row in matching:
        canonical.setdefault((row.chart_type, row.entry_key), row)

    results = SearchResults()
    for (chart_type, _), row in canonical.items():
        slug = row.slug or generate_slug(row.entry_key, chart_type)
        if chart_type == CHART_TYPE_ARTISTS:
            results.artists.append(
                ArtistHit(entry_key=row.entry_key, name=row.name, slug=slug)
            )
        elif chart_type == CHART_TYPE_TRACKS:
            results.tracks.append(
                ReleaseHit(
                    entry_key=row.entry_key, name=row.name, artist=row.artist, slug=slug
                )
            )
        elif chart_type == CHART_TYPE_ALBUMS:
            results.albums.append(
                ReleaseHit(
                    entry_key=row.entry_key, name=row.name, artist=row.artist, slug=slug
                )
            )

    results.artists.sort(key=lambda hit: collation_key(hit.name))
    results.tracks.sort(key=lambda hit: collation_key(hit.name))
    results.albums.sort(key=lambda hit: collation_key(hit.name))
    return results


def ensure_group_member(repo: ChartEntryRepository, group_id: str, user_id: str) -> None:
    """Check that the group exists and that the user belongs to it.

    Raises:
        GroupNotFoundError: If the group does not exist.
        GroupAccessError: If the user is not a member.
    """
    if repo.get_group(group_id) is None:
        raise GroupNotFoundError("Group not found")
    if not repo.is_member(group_id, user_id):
        raise GroupAccessError("You are not a member of this group")


def search_chart_entries(
    repo: ChartEntryRepository,
    group_id: str,
    search_term: str | None,
) -> SearchResults:
    """Search a group's chart entries by name.

    A blank term returns empty buckets without touching the database.
    """
    term = (search_term or "").strip()
    if not term:
        return SearchResults()

    rows = repo.search_by_name(group_id, term)
    results = deduplicate_chart_entries(rows, term)
    logger.debug(
        "Chart search in group %s collapsed %d rows into %d/%d/%d hits",
        group_id,
        len(rows),
        len(results.artists),
        len(results.tracks),
        len(results.albums),
    )
    return results
