import datetime

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from cert_registry.core.models.base import Principal
from cert_registry.settings import settings as st

bearer_scheme = HTTPBearer(auto_error=False)


JWT_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired JWT access-token",
    headers={"WWW-Authenticate": "Bearer"},
)


MISSING_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Missing authentication credentials",
    headers={"WWW-Authenticate": "Bearer"},
)


def create_access_token(
    principal: Principal, expires_delta: datetime.timedelta | None = None
) -> str:
    """Create an access token identifying the caller as `principal`.

    Args:
        principal (Principal): The principal the token speaks for.
        expires_delta (datetime.timedelta): Time until the token expires.

    Returns:
        encoded_jwt: The encoded JWT token.

    """
    if expires_delta is None:
        expires_delta = datetime.timedelta(minutes=st.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.datetime.now(tz=datetime.timezone.utc) + expires_delta
    to_encode = {"sub": principal, "exp": expire}
    encoded_jwt = jwt.encode(to_encode, st.JWT_SECRET_KEY, algorithm=st.JWT_ALGORITHM)
    return encoded_jwt


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    """Resolve the calling principal from the bearer token of the request."""
    if credentials is None:
        raise MISSING_CREDENTIALS_EXCEPTION

    try:
        payload = jwt.decode(
            credentials.credentials, st.JWT_SECRET_KEY, algorithms=[st.JWT_ALGORITHM]
        )
    except JWTError:
        raise JWT_CREDENTIALS_EXCEPTION

    principal = payload.get("sub")
    if not principal:
        raise JWT_CREDENTIALS_EXCEPTION

    return principal
