from fastapi import APIRouter, Depends, HTTPException, status
from clinic_auth.core.dependencies import get_session_context
from clinic_auth.core.exceptions import (
    AuthenticationFailure,
    NotAuthenticated,
    ProfileWriteFailure,
)
from clinic_auth.modules.auth.schemas import (
    LoginRequest, RegisterRequest, PasswordResetRequest, MessageResponse
)
from clinic_auth.modules.profiles.schemas import ProfileUpdate
from clinic_auth.modules.session.context import SessionContext
from clinic_auth.modules.session.schemas import SnapshotResponse

router = APIRouter(prefix="/session", tags=["session"])


@router.get("", response_model=SnapshotResponse)
async def get_session(session: SessionContext = Depends(get_session_context)):
    """Current session snapshot"""
    return SnapshotResponse.from_snapshot(session.snapshot)


@router.post("/sign-in", response_model=SnapshotResponse)
async def sign_in(
    login_data: LoginRequest,
    session: SessionContext = Depends(get_session_context)
):
    """Sign in; user and profile arrive with the following SIGNED_IN event"""
    try:
        await session.sign_in(login_data.email, login_data.password)
    except AuthenticationFailure as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)
    return SnapshotResponse.from_snapshot(session.snapshot)


@router.post("/sign-up", response_model=MessageResponse, status_code=201)
async def sign_up(
    register_data: RegisterRequest,
    session: SessionContext = Depends(get_session_context)
):
    """Register a new account"""
    try:
        await session.sign_up(
            register_data.email,
            register_data.password,
            register_data.full_name,
            register_data.role,
        )
    except AuthenticationFailure as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return {"message": "Cadastro realizado. Verifique seu e-mail para confirmar a conta."}


@router.post("/sign-out", response_model=SnapshotResponse)
async def sign_out(session: SessionContext = Depends(get_session_context)):
    try:
        await session.sign_out()
    except AuthenticationFailure as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return SnapshotResponse.from_snapshot(session.snapshot)


@router.patch("/profile", response_model=SnapshotResponse)
async def update_profile(
    updates: ProfileUpdate,
    session: SessionContext = Depends(get_session_context)
):
    """Update the signed-in user's profile"""
    try:
        await session.update_profile(updates)
    except NotAuthenticated as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)
    except ProfileWriteFailure as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return SnapshotResponse.from_snapshot(session.snapshot)


@router.delete("/error", response_model=SnapshotResponse)
async def clear_error(session: SessionContext = Depends(get_session_context)):
    session.clear_error()
    return SnapshotResponse.from_snapshot(session.snapshot)


@router.post("/password-reset", response_model=MessageResponse)
async def request_password_reset(
    reset_data: PasswordResetRequest,
    session: SessionContext = Depends(get_session_context)
):
    """Send a password recovery link"""
    try:
        await session.request_password_reset(reset_data.email)
    except AuthenticationFailure as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return {"message": "Enviamos um link de recuperação para o seu e-mail."}
