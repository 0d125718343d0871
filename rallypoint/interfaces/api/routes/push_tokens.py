"""Device registration endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from rallypoint.application.use_cases.push_tokens import (
    deactivate_push_token,
    register_push_token,
)
from rallypoint.domain.errors import NotificationError
from rallypoint.infrastructure.database import get_db
from rallypoint.interfaces.api.routes_helpers import push_token_to_schema, to_http_exception
from rallypoint.interfaces.api.schemas import PushTokenRead, PushTokenRegister

router = APIRouter(prefix="/push-tokens", tags=["push-tokens"])


@router.post("/", response_model=PushTokenRead, status_code=status.HTTP_201_CREATED)
def register_token(payload: PushTokenRegister, db: Session = Depends(get_db)) -> PushTokenRead:
    """Register (or re-activate) a device token for a user."""

    try:
        token = register_push_token(
            db, user_id=payload.user_id, token=payload.token, platform=payload.platform
        )
    except (NotificationError, ValueError) as exc:
        raise to_http_exception(exc) from exc
    return push_token_to_schema(token)


@router.delete("/{token}", status_code=status.HTTP_204_NO_CONTENT)
def deactivate_token(token: str, db: Session = Depends(get_db)) -> Response:
    try:
        deactivate_push_token(db, token=token)
    except NotificationError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
