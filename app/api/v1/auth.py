"""
Authentication endpoints
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.constants import ROLE_EMPLOYEE, PRIVILEGED_ROLES
from app.core.deps import get_db, get_current_user
from app.core.security import verify_password, create_access_token
from app.models.user import User
from app.schemas.auth import LoginRequest, MyRolesOut, SignupRequest, TokenResponse
from app.services.access_policy import get_user_roles
from app.services.audit_service import log_audit
from app.services.registration_service import register

router = APIRouter()
logger = logging.getLogger(__name__)


def _issue_token(user: User) -> TokenResponse:
    # JWT 'sub' claim must be a string
    access_token = create_access_token(data={"sub": str(user.id), "email": user.email})
    return TokenResponse(access_token=access_token, token_type="bearer", user_id=user.id)


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    signup_data: SignupRequest,
    db: Session = Depends(get_db)
):
    """
    Register a new identity and return a JWT token

    Creates the profile (next EMP code) and the initial role grant. A valid
    invite_token pre-fills the fields and grants the invited role.
    """
    user, _ = register(
        db,
        email=signup_data.email,
        password=signup_data.password,
        name=signup_data.name,
        department=signup_data.department,
        invite_token=signup_data.invite_token,
    )
    return _issue_token(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate user and return JWT token

    Validates email and password, rejects inactive users.
    """
    user = db.query(User).filter(User.email == login_data.email.strip().lower()).first()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    if not user.active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive"
        )

    if user.password_hash is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No password set for this account"
        )

    if not verify_password(login_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    log_audit(
        db=db,
        actor_id=user.id,
        action="AUTH_LOGIN_SUCCESS",
        entity_type="auth",
        entity_id=None,
        meta={"email": user.email}
    )
    logger.debug("User %s logged in", user.id)

    return _issue_token(user)


@router.get("/me/roles", response_model=MyRolesOut)
async def my_roles(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Roles held by the caller, with convenience flags"""
    roles = get_user_roles(db, current_user.id)
    return MyRolesOut(
        user_id=current_user.id,
        roles=roles,
        is_manager=any(role in PRIVILEGED_ROLES for role in roles),
        is_employee=ROLE_EMPLOYEE in roles,
    )
