from fastapi import APIRouter, Depends, status

from bodymetrics.api.deps import UserIdDep, UserRepositoryDep
from bodymetrics.core.auth import get_current_account_id
from bodymetrics.core.errors import NotFoundAppError
from bodymetrics.schemas.user import UserCreate, UserResponse, UserUpdate

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(get_current_account_id)],
)


def _user_not_found() -> NotFoundAppError:
    return NotFoundAppError(code="user_not_found", message="user not found")


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(body: UserCreate, users: UserRepositoryDep) -> UserResponse:
    user_id = await users.create(body.model_dump())
    created = await users.get_by_id(user_id)
    return UserResponse(**created)


@router.get("", response_model=list[UserResponse])
async def list_users(users: UserRepositoryDep) -> list[UserResponse]:
    return [UserResponse(**row) for row in await users.get_all()]


@router.get("/{id}", response_model=UserResponse)
async def get_user(user_id: UserIdDep, users: UserRepositoryDep) -> UserResponse:
    user = await users.get_by_id(user_id)
    if user is None:
        raise _user_not_found()
    return UserResponse(**user)


@router.patch("/{id}", response_model=UserResponse)
async def update_user(user_id: UserIdDep, body: UserUpdate, users: UserRepositoryDep) -> UserResponse:
    """Apply a partial update; fields absent from the body are left untouched."""
    if await users.get_by_id(user_id) is None:
        raise _user_not_found()

    await users.update(user_id, body.model_dump(exclude_unset=True))
    return UserResponse(**await users.get_by_id(user_id))
