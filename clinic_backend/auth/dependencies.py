from typing import Callable

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from clinic_backend.auth.identity import AuthenticatedUser, IdentityProvider, InvalidTokenError
from clinic_backend.dependencies import get_identity_provider

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> AuthenticatedUser:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Unauthorized: No token provided")

    try:
        return identity.verify_token(credentials.credentials)
    except InvalidTokenError as exc:
        raise HTTPException(status_code=401, detail="Unauthorized: Invalid token") from exc


def require_roles(*roles: str) -> Callable[..., AuthenticatedUser]:
    allowed = frozenset(roles)

    def dependency(current_user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
        if not current_user.role:
            raise HTTPException(status_code=403, detail="Forbidden: Role not assigned")
        if current_user.role not in allowed:
            raise HTTPException(status_code=403, detail="Forbidden: Insufficient role")
        return current_user

    return dependency
