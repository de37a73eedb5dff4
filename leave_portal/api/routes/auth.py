"""
Authentication Routes
Handles sign-up, login and the session cookie
"""
import logging
from fastapi import APIRouter, HTTPException, Depends, Response, status
from fastapi.security import APIKeyCookie, OAuth2PasswordRequestForm
from datetime import datetime, timedelta
from jose import JWTError, jwt
from passlib.context import CryptContext
from typing import Optional

from leave_portal.config import settings
from leave_portal.models.session import SessionContext
from leave_portal.models.staff import Staff, StaffCreate, StaffResponse, StaffRole


router = APIRouter()
logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")

# Session cookie scheme
session_cookie = APIKeyCookie(name=settings.SESSION_COOKIE_NAME, auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash password"""
    return pwd_context.hash(password)


def create_session_token(staff: Staff, expires_delta: Optional[timedelta] = None) -> str:
    """Sign the session claims for a staff member"""
    expire = datetime.utcnow() + (expires_delta or timedelta(days=settings.SESSION_EXPIRE_DAYS))
    to_encode = {
        "sub": staff.staff_id,
        "name": staff.full_name,
        "role": staff.role.value,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_session_token(token: str) -> Optional[SessionContext]:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return SessionContext(
            user_id=payload["sub"],
            name=payload["name"],
            role=payload["role"],
        )
    except (JWTError, KeyError, ValueError):
        return None


async def authenticate(email: str, password: str) -> Optional[Staff]:
    """Return the staff principal for valid credentials"""
    staff = await Staff.find_one(Staff.email == email)
    if not staff or not verify_password(password, staff.password_hash):
        return None
    return staff


async def create_principal(data: StaffCreate) -> Staff:
    """Create a staff record that can log in"""
    staff_dict = data.model_dump(exclude={"password"})
    staff = Staff(**staff_dict, password_hash=get_password_hash(data.password))
    await staff.insert()
    return staff


async def get_current_session(token: Optional[str] = Depends(session_cookie)) -> SessionContext:
    """Decode the session cookie into the request-scoped identity"""
    session = decode_session_token(token) if token else None
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return session


async def get_current_staff(session: SessionContext = Depends(get_current_session)) -> Staff:
    """Load the staff record behind the session"""
    staff = await Staff.find_one(Staff.staff_id == session.user_id)
    if staff is None or not staff.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    return staff


async def get_active_session(session: SessionContext = Depends(get_current_session)) -> SessionContext:
    """Session whose staff record still exists and is active; required for writes"""
    await get_current_staff(session)
    return session


def set_session_cookie(response: Response, token: str):
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="strict",
        secure=settings.SESSION_COOKIE_SECURE,
        max_age=settings.SESSION_EXPIRE_DAYS * 24 * 60 * 60,
    )


@router.post("/signup", response_model=StaffResponse)
async def signup(
    request: StaffCreate,
    current_staff: Staff = Depends(get_current_staff)
):
    """
    Create a principal and its staff record (Admin only)
    """
    if current_staff.role != StaffRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins can create staff accounts"
        )

    if await Staff.find_one(Staff.email == request.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )
    if await Staff.find_one(Staff.staff_id == request.staff_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Staff ID already registered"
        )

    staff = await create_principal(request)
    logger.info("Staff %s created by %s", staff.staff_id, current_staff.staff_id)
    return StaffResponse.model_validate(staff)


@router.post("/login")
async def login(response: Response, form_data: OAuth2PasswordRequestForm = Depends()):
    """
    Login with email and password; issues the session cookie
    """
    staff = await authenticate(form_data.username, form_data.password)

    if staff is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )

    if not staff.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive"
        )

    staff.last_login = datetime.utcnow()
    await staff.save()

    set_session_cookie(response, create_session_token(staff))
    return {
        "message": "Login successful",
        "user_id": staff.staff_id,
        "name": staff.full_name,
        "role": staff.role,
    }


@router.post("/logout")
async def logout(response: Response):
    """Clear the session cookie"""
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"message": "Logged out"}


@router.get("/me")
async def get_me(current_staff: Staff = Depends(get_current_staff)):
    """
    Get current authenticated staff details
    """
    return {
        "staff_id": current_staff.staff_id,
        "name": current_staff.full_name,
        "email": current_staff.email,
        "designation": current_staff.designation,
        "role": current_staff.role,
        "reporting_authority": current_staff.reporting_authority,
        "profile_picture": current_staff.profile_picture
    }
