"""Group chart search endpoint for the Chartroom API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from chartroom.api.v1.dependencies import ChartEntryRepoDep, CurrentUserDep
from chartroom.schemas.search import SearchResults
from chartroom.services.chart_search import ensure_group_member, search_chart_entries
from chartroom.services.errors import GroupAccessError, GroupNotFoundError

router = APIRouter(prefix="/groups", tags=["search"])


@router.get("/{group_id}/search", response_model=SearchResults)
async def search_group_chart_entries(
    group_id: str,
    current_user: CurrentUserDep,
    repo: ChartEntryRepoDep,
    q: str | None = Query(None, description="Case-insensitive name fragment"),
) -> SearchResults:
    """Search a group's chart history for artists, tracks and albums."""
    try:
        ensure_group_member(repo, group_id, current_user.id)
    except GroupNotFoundError as err:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(err)) from err
    except GroupAccessError as err:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(err)) from err
    return search_chart_entries(repo, group_id, q)
