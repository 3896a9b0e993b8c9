from fastapi import APIRouter, Depends

from clinic_backend.auth.dependencies import get_current_user, require_roles
from clinic_backend.auth.identity import ROLE_ADMIN, AuthenticatedUser
from clinic_backend.core.errors import NotFoundError
from clinic_backend.dependencies import get_user_service
from clinic_backend.schemas.directory import RegisterRequest, RoleUpdateRequest, UserResponse
from clinic_backend.services.directory_service import UserService

router = APIRouter(tags=['auth'])


@router.post('/register', response_model=UserResponse)
def register(
    data: RegisterRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    return users.register(current_user, data)


@router.get('/me', response_model=UserResponse)
def me(
    current_user: AuthenticatedUser = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    user = users.get(current_user.uid)
    if user is None:
        raise NotFoundError('User not found')
    return user


@router.put('/users/{uid}/role', response_model=UserResponse, dependencies=[Depends(require_roles(ROLE_ADMIN))])
def set_user_role(
    uid: str,
    data: RoleUpdateRequest,
    users: UserService = Depends(get_user_service),
):
    return users.set_role(uid, data.role)
