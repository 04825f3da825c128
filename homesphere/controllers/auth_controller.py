from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from homesphere.database.connection import get_db
from homesphere.models.user import User
from homesphere.query.projection import project_agent_profile, project_user
from homesphere.schemas.auth import (
    AuthResponse,
    EmailRequest,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    ResetPasswordRequest,
    VerifyEmailRequest,
)
from homesphere.schemas.common import MessageResponse
from homesphere.services import auth_service, email_service
from homesphere.services.agent_service import get_agent_row
from homesphere.utils.background import run_best_effort
from homesphere.utils.dependencies import get_current_user

router = APIRouter(prefix="/auth", tags=["Authentication"])

GENERIC_EMAIL_MESSAGE = "If an account exists for this email, a message has been sent."


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_db),
):
    """Register a user or agent; the verification email is sent after the response"""
    user, token, verification_token = await auth_service.register_user(session, request.dict())
    background_tasks.add_task(run_best_effort, email_service.send_verification_email, user.email, verification_token)
    return AuthResponse(message="User created successfully", token=token, user=project_user(user))


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, session: AsyncSession = Depends(get_db)):
    user, token = await auth_service.login_user(session, request.email, request.password)
    return AuthResponse(message="Login successful", token=token, user=project_user(user))


async def _me(user: User, session: AsyncSession) -> MeResponse:
    agent = None
    if user.agent is not None:
        agent = project_agent_profile(await get_agent_row(session, user.agent.id))
    return MeResponse(user=project_user(user), agent=agent)


@router.get("/me", response_model=MeResponse)
async def me(user: User = Depends(get_current_user), session: AsyncSession = Depends(get_db)):
    """Current account, with the agent profile for agents"""
    return await _me(user, session)


@router.get("/profile", response_model=MeResponse)
async def profile(user: User = Depends(get_current_user), session: AsyncSession = Depends(get_db)):
    return await _me(user, session)


@router.post("/verify-email", response_model=MessageResponse)
async def verify_email(
    request: VerifyEmailRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_db),
):
    user = await auth_service.verify_email(session, request.token)
    background_tasks.add_task(run_best_effort, email_service.send_welcome_email, user.email, user.first_name)
    return MessageResponse(message="Email verified successfully")


@router.post("/resend-verification", response_model=MessageResponse)
async def resend_verification(
    request: EmailRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_db),
):
    token = await auth_service.refresh_verification_token(session, request.email)
    if token:
        background_tasks.add_task(run_best_effort, email_service.send_verification_email, request.email.lower(), token)
    return MessageResponse(message=GENERIC_EMAIL_MESSAGE)


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(request: EmailRequest, session: AsyncSession = Depends(get_db)):
    """The reset email is this request's purpose, so delivery failures surface as 503"""
    await auth_service.request_password_reset(session, request.email)
    return MessageResponse(message=GENERIC_EMAIL_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(request: ResetPasswordRequest, session: AsyncSession = Depends(get_db)):
    await auth_service.reset_password(session, request.token, request.password)
    return MessageResponse(message="Password reset successfully")
