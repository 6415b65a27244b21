from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from eventpulse.db import get_session
from eventpulse.services.exceptions import PermissionDeniedError

SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def current_user_id(x_user_id: Annotated[int | None, Header()] = None) -> int:
    # Set by the authenticating gateway in front of the API.
    if x_user_id is None or x_user_id <= 0:
        raise PermissionDeniedError("Authentication required")
    return x_user_id


async def optional_user_id(x_user_id: Annotated[int | None, Header()] = None) -> int | None:
    return x_user_id


UserIdDep = Annotated[int, Depends(current_user_id)]
OptionalUserIdDep = Annotated[int | None, Depends(optional_user_id)]
