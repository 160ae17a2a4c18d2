"""
# Club Routes

- `POST /api/clubs` - Create a club
- `GET /api/clubs` - List clubs
- `GET /api/clubs/{club_id}` - Club details
- `GET /api/clubs/{club_id}/events` - Active events of a club
- `PATCH /api/clubs/{club_id}/deactivate` - Soft delete a club
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from campus_events.errors import CampusEventsError, to_http_exception
from campus_events.managers.logging_manager import get_logger
from campus_events.models.club_models import ClubResponse, CreateClubRequest
from campus_events.models.event_models import EventResponse
from campus_events.routes.dependencies import get_club_service, get_event_repository
from campus_events.services.club_service import ClubService
from campus_events.services.event_repository import EventRepository

logger = get_logger(prefix="[Club Routes]")

router = APIRouter(prefix="/api/clubs", tags=["Clubs"])


@router.post("", response_model=ClubResponse, status_code=status.HTTP_201_CREATED)
async def create_club(request: CreateClubRequest, club_service: ClubService = Depends(get_club_service)):
    try:
        return await club_service.create_club(request)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to create club: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create club")


@router.get("", response_model=List[ClubResponse])
async def list_clubs(
    active_only: bool = Query(True),
    club_service: ClubService = Depends(get_club_service),
):
    try:
        return await club_service.list_clubs(active_only=active_only)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to list clubs: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to list clubs")


@router.get("/{club_id}", response_model=ClubResponse)
async def get_club(club_id: str, club_service: ClubService = Depends(get_club_service)):
    try:
        return await club_service.get_club(club_id)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to get club %s: %s", club_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to get club")


@router.get("/{club_id}/events", response_model=List[EventResponse])
async def list_club_events(
    club_id: str,
    club_service: ClubService = Depends(get_club_service),
    repository: EventRepository = Depends(get_event_repository),
):
    try:
        await club_service.get_club(club_id)
        return await repository.list_by_club(club_id)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to list events for club %s: %s", club_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to list club events")


@router.patch("/{club_id}/deactivate", response_model=ClubResponse)
async def deactivate_club(club_id: str, club_service: ClubService = Depends(get_club_service)):
    try:
        return await club_service.deactivate_club(club_id)
    except HTTPException:
        raise
    except CampusEventsError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error("Failed to deactivate club %s: %s", club_id, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to deactivate club")
