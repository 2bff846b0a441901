"""
zapShift Backend — User Route Handlers
========================================

What:  POST /users, GET /users/search, GET /users/role, PATCH /users/{id}/role
Who:   Called by the frontend on sign-in, by the admin user-management page,
       and by the role hook that decides which dashboard to render.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from zapshift.database import DocumentStore, get_store
from zapshift.guards import admin_required
from zapshift.schemas.common import CreatedResponse, ErrorResponse, ListResponse, MessageResponse
from zapshift.schemas.user import RoleResponse, UserCreate, UserRoleUpdate
from zapshift.services.identity_base import Identity
from zapshift.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    status_code=201,
    responses={
        200: {"description": "User already exists; nothing changed"},
        201: {"description": "User created", "model": CreatedResponse},
        400: {"description": "Missing email", "model": ErrorResponse},
    },
    summary="Register a user on first sign-in",
)
async def create_user(
    payload: UserCreate,
    response: Response,
    store: DocumentStore = Depends(get_store),
):
    inserted_id = await user_service.create_user(store, payload)
    if inserted_id is None:
        response.status_code = 200
        return {"success": True, "message": "User already exists", "inserted": False}
    return CreatedResponse(message="User created successfully", insertedId=inserted_id)


@router.get(
    "/search",
    response_model=ListResponse,
    responses={
        400: {"description": "Empty keyword", "model": ErrorResponse},
        404: {"description": "No matching users", "model": ErrorResponse},
    },
    summary="Search users by name or email (max 10 results)",
)
async def search_users(
    keyword: Optional[str] = Query(default=None, description="Case-insensitive substring"),
    store: DocumentStore = Depends(get_store),
) -> ListResponse:
    users = await user_service.search_users(store, keyword)
    return ListResponse(data=users)


@router.get(
    "/role",
    response_model=RoleResponse,
    responses={
        400: {"description": "Missing email", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Get a user's role by email",
)
async def get_user_role(
    email: Optional[str] = Query(default=None),
    store: DocumentStore = Depends(get_store),
) -> RoleResponse:
    role = await user_service.get_role_by_email(store, email)
    return RoleResponse(role=role)


@router.patch(
    "/{user_id}/role",
    response_model=MessageResponse,
    responses={
        400: {"description": "Bad ID or role", "model": ErrorResponse},
        401: {"description": "Missing bearer token", "model": ErrorResponse},
        403: {"description": "Not an admin", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Change a user's role (admin only)",
)
async def update_user_role(
    user_id: str,
    payload: UserRoleUpdate,
    identity: Identity = Depends(admin_required),
    store: DocumentStore = Depends(get_store),
) -> MessageResponse:
    await user_service.update_role(store, user_id, payload.role)
    logger.info("Admin %s set role of %s to %s", identity.email, user_id, payload.role)
    return MessageResponse(message=f"User role updated to {payload.role}")
