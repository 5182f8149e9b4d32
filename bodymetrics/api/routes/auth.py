from fastapi import APIRouter, BackgroundTasks, Depends, Request, status

from bodymetrics.api.deps import AuthServiceDep
from bodymetrics.core.rate_limit import FORGOT_PASSWORD, LOGIN, rate_limit
from bodymetrics.schemas.auth import (
    ForgotPasswordRequest,
    MessageResponse,
    ResetPasswordRequest,
    TokenRequest,
    TokenResponse,
)

router = APIRouter(prefix="/auth", tags=["Auth"])

FORGOT_PASSWORD_MESSAGE = "if the email exists, a code has been sent"


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(body: TokenRequest, auth: AuthServiceDep) -> TokenResponse:
    """Create an account and return its access token.

    Raises:
        ValidationAppError: 400 on missing fields, bad email or short password.
        ConflictAppError: 409 when the email is already registered.
    """
    token = await auth.register(body.email, body.password)
    return TokenResponse(token=token)


@router.post(
    "/login",
    response_model=TokenResponse,
    dependencies=[Depends(rate_limit(LOGIN))],
)
async def login(body: TokenRequest, auth: AuthServiceDep) -> TokenResponse:
    """Exchange credentials for an access token.

    Throttled per client; the limiter counts every attempt, successful or not.
    """
    token = await auth.login(body.email, body.password)
    return TokenResponse(token=token)


async def _email_from_body(request: Request) -> str:
    """Return the ``email`` string of a JSON object body, else an empty string."""
    try:
        payload = await request.json()
    except ValueError:
        return ""
    if not isinstance(payload, dict):
        return ""
    email = payload.get("email")
    return email.strip() if isinstance(email, str) else ""


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit(FORGOT_PASSWORD))],
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": ForgotPasswordRequest.model_json_schema()}},
        }
    },
)
async def forgot_password(
    request: Request,
    background_tasks: BackgroundTasks,
    auth: AuthServiceDep,
) -> MessageResponse:
    """Email a reset code to the account, if it exists.

    The answer is identical whether or not the email is registered, and also
    when the body is unreadable; the code is generated and sent after the
    response.
    """
    email = await _email_from_body(request)
    if email:
        background_tasks.add_task(auth.send_reset_code, email)
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(body: ResetPasswordRequest, auth: AuthServiceDep) -> MessageResponse:
    await auth.reset_password(body.email, body.token, body.password)
    return MessageResponse(message="password reset successful")
