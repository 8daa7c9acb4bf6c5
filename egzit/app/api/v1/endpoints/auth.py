"""
Authentication API endpoints.

Customer registration, login, current-user info and logout.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from egzit.app.db.session import get_db
from egzit.app.models.user import User
from egzit.app.models.enums import UserRole
from egzit.app.schemas.auth import UserRegister, UserLogin, TokenResponse, UserResponse
from egzit.app.core.security import get_password_hash, verify_password
from egzit.app.core.jwt import create_access_token
from egzit.app.core.dependencies import get_current_user, security
from egzit.app.core.token_revocation import revoke_token
from egzit.app.services.audit import log_auth_event, AuditAction

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _issue_token(user: User) -> TokenResponse:
    jwt_payload = {
        "sub": user.username,
        "user_id": user.id,
        "role": user.role.value,
    }
    return TokenResponse(
        access_token=create_access_token(data=jwt_payload),
        token_type="bearer",
        user_id=user.id,
        username=user.username,
        email=user.email,
        role=user.role,
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new customer.

    Admin accounts cannot be created through the API.
    """
    result = await db.execute(
        select(User).where(
            or_(User.username == user_data.username, User.email == user_data.email)
        )
    )
    existing_user = result.scalars().first()

    if existing_user:
        if existing_user.username == user_data.username:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username already registered"
            )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    new_user = User(
        email=user_data.email,
        username=user_data.username,
        full_name=user_data.full_name,
        phone=user_data.phone,
        hashed_password=get_password_hash(user_data.password),
        role=UserRole.CUSTOMER,
        is_active=True,
    )
    db.add(new_user)
    await db.flush()

    await log_auth_event(
        db=db,
        action=AuditAction.USER_CREATED,
        user_id=new_user.id,
        username=new_user.username,
        ip_address=request.client.host if request.client else None
    )
    await db.commit()
    await db.refresh(new_user)

    return _issue_token(new_user)


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Login user and return JWT token.

    Accepts username or email. Successful and failed attempts are audited.
    """
    ip_address = request.client.host if request.client else None

    result = await db.execute(
        select(User).where(
            or_(User.username == credentials.username, User.email == credentials.username)
        )
    )
    user = result.scalars().first()

    if not user or not verify_password(credentials.password, user.hashed_password):
        await log_auth_event(
            db=db,
            action=AuditAction.LOGIN_FAILED,
            user_id=user.id if user else None,
            username=credentials.username,
            ip_address=ip_address,
            metadata={"reason": "Invalid password" if user else "User not found"}
        )
        await db.commit()
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        await log_auth_event(
            db=db,
            action=AuditAction.LOGIN_FAILED,
            user_id=user.id,
            username=user.username,
            ip_address=ip_address,
            metadata={"reason": "Account is inactive"}
        )
        await db.commit()
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user account"
        )

    await log_auth_event(
        db=db,
        action=AuditAction.LOGIN_SUCCESS,
        user_id=user.id,
        username=user.username,
        ip_address=ip_address
    )
    await db.commit()

    return _issue_token(user)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get current authenticated user information."""
    result = await db.execute(select(User).where(User.id == current_user.get("user_id")))
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    return UserResponse.model_validate(user)


@router.post("/logout")
async def logout(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Revoke the presented token."""
    revoked = await revoke_token(credentials.credentials, current_user["user_id"])

    await log_auth_event(
        db=db,
        action=AuditAction.LOGOUT,
        user_id=current_user["user_id"],
        username=current_user.get("sub"),
        metadata={"revoked": revoked}
    )
    await db.commit()

    return {"status": "success", "revoked": revoked}
