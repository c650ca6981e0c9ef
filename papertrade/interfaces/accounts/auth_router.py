"""
FastAPI router for registration, login and the caller's own profile.

All routes delegate to use cases. No business logic here.
"""

from fastapi import APIRouter, Depends, status

from papertrade.application.accounts.dtos import (
    AuthResult,
    ChangePasswordCommand,
    LoginCommand,
    RegisterUserCommand,
    UpdateProfileCommand,
)
from papertrade.application.accounts.login_user import LoginUserUseCase
from papertrade.application.accounts.profile import (
    ChangePasswordUseCase,
    GetProfileUseCase,
    UpdateProfileUseCase,
)
from papertrade.application.accounts.register_user import RegisterUserUseCase
from papertrade.application.audit_trail import RequestContext
from papertrade.domain.accounts.entities import User
from papertrade.interfaces.accounts.dependencies import (
    get_change_password_use_case,
    get_login_user_use_case,
    get_profile_use_case,
    get_register_user_use_case,
    get_update_profile_use_case,
)
from papertrade.interfaces.accounts.schemas import (
    AuthData,
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    UpdateProfileRequest,
    UserData,
    UserSchema,
)
from papertrade.interfaces.dependencies import get_current_user, get_request_context
from papertrade.interfaces.envelope import ERROR_RESPONSES, Envelope, ok

router = APIRouter(prefix="/auth", tags=["auth"], responses=ERROR_RESPONSES)


def _auth_data(result: AuthResult) -> AuthData:
    return AuthData(user=UserSchema.model_validate(result.user), token=result.token)


@router.post(
    "/register",
    response_model=Envelope[AuthData],
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    description="New accounts start with the configured virtual wallet balance.",
)
def register(
    request: RegisterRequest,
    context: RequestContext = Depends(get_request_context),
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
) -> dict:
    command = RegisterUserCommand(
        name=request.name,
        email=request.email,
        password=request.password,
        phone=request.phone,
    )
    result = use_case.execute(command, context)
    return ok(_auth_data(result), message="User registered successfully")


@router.post("/login", response_model=Envelope[AuthData], summary="Log in")
def login(
    request: LoginRequest,
    context: RequestContext = Depends(get_request_context),
    use_case: LoginUserUseCase = Depends(get_login_user_use_case),
) -> dict:
    command = LoginCommand(
        email=request.email,
        password=request.password,
        remember_me=request.remember_me,
    )
    result = use_case.execute(command, context)
    return ok(_auth_data(result), message="Login successful")


@router.get("/profile", response_model=Envelope[UserData], summary="My profile")
def get_profile(
    user: User = Depends(get_current_user),
    use_case: GetProfileUseCase = Depends(get_profile_use_case),
) -> dict:
    return ok(UserData(user=UserSchema.model_validate(use_case.execute(user.id))))


@router.put("/profile", response_model=Envelope[UserData], summary="Update my profile")
def update_profile(
    request: UpdateProfileRequest,
    user: User = Depends(get_current_user),
    context: RequestContext = Depends(get_request_context),
    use_case: UpdateProfileUseCase = Depends(get_update_profile_use_case),
) -> dict:
    command = UpdateProfileCommand(user_id=user.id, name=request.name, phone=request.phone)
    updated = use_case.execute(command, context)
    return ok(
        UserData(user=UserSchema.model_validate(updated)),
        message="Profile updated successfully",
    )


@router.put("/password", response_model=Envelope[None], summary="Change my password")
def change_password(
    request: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    context: RequestContext = Depends(get_request_context),
    use_case: ChangePasswordUseCase = Depends(get_change_password_use_case),
) -> dict:
    command = ChangePasswordCommand(
        user_id=user.id,
        current_password=request.current_password,
        new_password=request.new_password,
    )
    use_case.execute(command, context)
    return ok(message="Password changed successfully")
