"""Shared FastAPI dependencies for route handlers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Path, Request

from bodymetrics.core.errors import ValidationAppError
from bodymetrics.db.connection import Database
from bodymetrics.repositories.accounts import AccountRepository
from bodymetrics.repositories.metrics import MetricRepository
from bodymetrics.repositories.reset_tokens import ResetTokenRepository
from bodymetrics.repositories.users import UserRepository
from bodymetrics.services.auth_service import AuthService


def get_database(request: Request) -> Database:
    return request.app.state.db


DatabaseDep = Annotated[Database, Depends(get_database)]


def get_auth_service(request: Request, db: DatabaseDep) -> AuthService:
    return AuthService(
        accounts=AccountRepository(db),
        reset_tokens=ResetTokenRepository(db),
        email_sender=request.app.state.email_sender,
    )


def get_user_repository(db: DatabaseDep) -> UserRepository:
    return UserRepository(db)


def get_metric_repository(db: DatabaseDep) -> MetricRepository:
    return MetricRepository(db)


def parse_user_id(id: Annotated[str, Path()]) -> int:  # noqa: A002
    """Parse the ``{id}`` path segment, answering 400 instead of 422."""
    try:
        value = int(id)
    except ValueError:
        raise ValidationAppError(code="invalid_user_id", message="invalid user id") from None
    if value < 1:
        raise ValidationAppError(code="invalid_user_id", message="invalid user id")
    return value


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserRepositoryDep = Annotated[UserRepository, Depends(get_user_repository)]
MetricRepositoryDep = Annotated[MetricRepository, Depends(get_metric_repository)]
UserIdDep = Annotated[int, Depends(parse_user_id)]
