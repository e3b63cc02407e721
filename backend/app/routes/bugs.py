"""
Bug Reporter Backend — Bug Route Handlers
===========================================

What:  CRUD endpoints under /api/bugs.
How:   Extracts path/body data, delegates to BugService, returns JSON.
Who:   Called by the reporting client (app.reporter) and any other frontend.

Endpoints:
    GET    /api/bugs                 list every bug (newest first)
    GET    /api/bugs/{id}            single bug
    POST   /api/bugs                 create (201)
    PUT    /api/bugs/{id}/status     replace status
    PUT    /api/bugs/{id}/priority   replace priority
    PUT    /api/bugs/{id}/metadata   merge metadata keys
    DELETE /api/bugs/{id}            hard delete (204)
"""

import logging
from typing import List

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.bug import (
    BugCreate,
    BugResponse,
    ErrorResponse,
    Metadata,
    PriorityUpdate,
    StatusUpdate,
)
from app.services.bug_service import bug_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bugs", tags=["Bugs"])

NOT_FOUND = {404: {"description": "Bug not found", "model": ErrorResponse}}
SERVER_ERROR = {500: {"description": "Server error", "model": ErrorResponse}}


@router.get(
    "",
    response_model=List[BugResponse],
    responses=SERVER_ERROR,
    summary="List all bug reports",
)
async def list_bugs(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> List[BugResponse]:
    """Returns every bug, newest first. No pagination or filtering."""
    bugs = await bug_service.list_bugs(db)
    response.headers["X-Total-Count"] = str(len(bugs))
    return bugs


@router.get(
    "/{bug_id}",
    response_model=BugResponse,
    responses={**NOT_FOUND, **SERVER_ERROR},
    summary="Get a single bug report",
)
async def get_bug(
    bug_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> BugResponse:
    return await bug_service.get_bug(db, bug_id)


@router.post(
    "",
    response_model=BugResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, **SERVER_ERROR},
    summary="Report a new bug",
    description=(
        "Creates a bug. Only `title` is required; `priority` defaults to MEDIUM and "
        "`status` always starts as OPEN. `id` and `createdAt` are assigned by the server."
    ),
)
async def create_bug(
    payload: BugCreate,
    db: AsyncSession = Depends(get_db_session),
) -> BugResponse:
    return await bug_service.create_bug(db, payload)


@router.put(
    "/{bug_id}/status",
    response_model=BugResponse,
    responses={**NOT_FOUND, **SERVER_ERROR},
    summary="Change a bug's status",
)
async def update_bug_status(
    bug_id: int,
    payload: StatusUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> BugResponse:
    return await bug_service.update_status(db, bug_id, payload.status)


@router.put(
    "/{bug_id}/priority",
    response_model=BugResponse,
    responses={**NOT_FOUND, **SERVER_ERROR},
    summary="Change a bug's priority",
)
async def update_bug_priority(
    bug_id: int,
    payload: PriorityUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> BugResponse:
    return await bug_service.update_priority(db, bug_id, payload.priority)


@router.put(
    "/{bug_id}/metadata",
    response_model=BugResponse,
    responses={**NOT_FOUND, **SERVER_ERROR},
    summary="Merge metadata into a bug",
    description="Keys in the body overwrite stored keys; other stored keys are kept.",
)
async def update_bug_metadata(
    bug_id: int,
    metadata: Metadata = Body(...),
    db: AsyncSession = Depends(get_db_session),
) -> BugResponse:
    return await bug_service.update_metadata(db, bug_id, metadata)


@router.delete(
    "/{bug_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**NOT_FOUND, **SERVER_ERROR},
    summary="Delete a bug report",
)
async def delete_bug(
    bug_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await bug_service.delete_bug(db, bug_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
