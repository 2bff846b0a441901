"""
zapShift Backend — User Service
=================================

What:  Sign-in registration, keyword search, role lookup and admin role changes.
Who:   Called by the users router and by the admin guard.

Error Handling Strategy:
    Input problems raise InvalidRequestError before any store call. Driver
    errors (PyMongoError) are logged with context and re-raised as
    DatabaseError so the client only ever sees a generic 500.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo.errors import PyMongoError

from zapshift.database import (
    DocumentStore,
    contains_ci,
    exact_match_ci,
    parse_object_id,
    serialize_documents,
)
from zapshift.exceptions import DatabaseError, InvalidRequestError, NotFoundError
from zapshift.schemas.user import ASSIGNABLE_ROLES, DEFAULT_ROLE, UserCreate

logger = logging.getLogger(__name__)

SEARCH_RESULT_LIMIT = 10


class UserService:

    async def create_user(self, store: DocumentStore, payload: UserCreate) -> Optional[str]:
        """
        Register a user on first sign-in.

        Returns:
            The new user's ID, or None when the email is already registered.
            An existing record is left untouched (last_log_in is not refreshed).
        """
        try:
            existing = await store.users.find_one(
                {"email": exact_match_ci(payload.email)}, {"_id": 1}
            )
            if existing:
                logger.info("User %s already exists; skipping insert", payload.email)
                return None

            now = datetime.now(timezone.utc)
            document = payload.model_dump(exclude_none=True)
            document["role"] = DEFAULT_ROLE
            document.setdefault("created_at", now)
            document.setdefault("last_log_in", now)
            result = await store.users.insert_one(document)
        except PyMongoError as e:
            logger.error("Database error creating user %s: %s", payload.email, str(e))
            raise DatabaseError(context={"error_type": type(e).__name__, "collection": "users"})

        logger.info("User created: %s", result.inserted_id)
        return str(result.inserted_id)

    async def search_users(self, store: DocumentStore, keyword: Optional[str]) -> List[Dict[str, Any]]:
        """
        Case-insensitive substring search over name or email.

        Raises:
            InvalidRequestError: keyword missing or blank (→ 400)
            NotFoundError: nothing matched (→ 404)
        """
        keyword = (keyword or "").strip()
        if not keyword:
            raise InvalidRequestError(message="Search keyword is required", field="keyword")

        query = {"$or": [{"name": contains_ci(keyword)}, {"email": contains_ci(keyword)}]}
        try:
            cursor = store.users.find(query, {"password": 0}).limit(SEARCH_RESULT_LIMIT)
            users = await cursor.to_list(length=SEARCH_RESULT_LIMIT)
        except PyMongoError as e:
            logger.error("Database error searching users for %r: %s", keyword, str(e))
            raise DatabaseError(context={"error_type": type(e).__name__, "collection": "users"})

        if not users:
            raise NotFoundError(resource="user", message="No users found")
        return serialize_documents(users)

    async def find_role(self, store: DocumentStore, email: str) -> Optional[str]:
        """
        Role of the user with this email (case-insensitive exact match).

        Returns None when no such user exists, DEFAULT_ROLE when the user
        document has no role field.
        """
        try:
            user = await store.users.find_one({"email": exact_match_ci(email)}, {"role": 1})
        except PyMongoError as e:
            logger.error("Database error looking up role for %s: %s", email, str(e))
            raise DatabaseError(context={"error_type": type(e).__name__, "collection": "users"})

        if user is None:
            return None
        return user.get("role") or DEFAULT_ROLE

    async def get_role_by_email(self, store: DocumentStore, email: Optional[str]) -> str:
        email = (email or "").strip()
        if not email:
            raise InvalidRequestError(message="Email is required", field="email")

        role = await self.find_role(store, email)
        if role is None:
            raise NotFoundError(resource="user", message="User not found")
        return role

    async def update_role(self, store: DocumentStore, user_id: str, role: str) -> None:
        """
        Admin-only role assignment.

        Raises:
            InvalidRequestError: malformed ID or role outside ASSIGNABLE_ROLES
            NotFoundError: no user with that ID
        """
        object_id = parse_object_id(user_id, "user")
        if role not in ASSIGNABLE_ROLES:
            raise InvalidRequestError(
                message=f"Invalid role. Must be one of: {', '.join(ASSIGNABLE_ROLES)}",
                field="role",
            )

        try:
            result = await store.users.update_one({"_id": object_id}, {"$set": {"role": role}})
        except PyMongoError as e:
            logger.error("Database error updating role of user %s: %s", user_id, str(e))
            raise DatabaseError(context={"error_type": type(e).__name__, "collection": "users"})

        if result.matched_count == 0:
            raise NotFoundError(resource="user", resource_id=user_id)
        logger.info("User %s role set to %s", user_id, role)


user_service = UserService()
