from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from bodymetrics.api.deps import MetricRepositoryDep, UserIdDep, UserRepositoryDep
from bodymetrics.core.auth import get_current_account_id
from bodymetrics.core.errors import NotFoundAppError
from bodymetrics.schemas.metric import MetricCreate, MetricResponse

router = APIRouter(
    prefix="/users/{id}/metrics",
    tags=["Metrics"],
    dependencies=[Depends(get_current_account_id)],
)


@router.post("", response_model=MetricResponse, status_code=status.HTTP_201_CREATED)
async def create_metric(
    user_id: UserIdDep,
    body: MetricCreate,
    users: UserRepositoryDep,
    metrics: MetricRepositoryDep,
) -> MetricResponse:
    """Append a measurement to the user's history."""
    if await users.get_by_id(user_id) is None:
        raise NotFoundAppError(code="user_not_found", message="user not found")

    data = body.model_dump()
    if data["created_at"] is None:
        data["created_at"] = datetime.now(timezone.utc).isoformat(timespec="seconds")

    metric_id = await metrics.create(user_id, data)
    return MetricResponse(id=metric_id, user_id=user_id, **data)


@router.get("", response_model=list[MetricResponse])
async def list_metrics(user_id: UserIdDep, metrics: MetricRepositoryDep) -> list[MetricResponse]:
    """Return the user's history, oldest first; empty when there is none."""
    return [MetricResponse(**row) for row in await metrics.get_by_user_id(user_id)]
