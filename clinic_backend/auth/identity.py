"""Identity providers: turn a bearer token into an ``AuthenticatedUser`` and manage role claims."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import jwt
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions

from clinic_backend.auth import jwt_handler
from clinic_backend.core.errors import DataAccessError
from clinic_backend.store.base import DocumentStore

logger = logging.getLogger(__name__)

ROLE_ADMIN = 'admin'
ROLE_DOCTOR = 'doctor'
ROLE_PATIENT = 'patient'
ROLES = (ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT)
STAFF_ROLES = (ROLE_ADMIN, ROLE_DOCTOR)

USERS_COLLECTION = 'users'


class InvalidTokenError(Exception):
    pass


@dataclass(frozen=True)
class AuthenticatedUser:
    uid: str
    email: str = ''
    name: str = ''
    role: str | None = None


class IdentityProvider(ABC):
    @abstractmethod
    def verify_token(self, token: str) -> AuthenticatedUser:
        """Raise InvalidTokenError when the token cannot be trusted."""

    @abstractmethod
    def set_role(self, uid: str, role: str) -> None:
        """Attach ``role`` to the subject; it appears on tokens issued afterwards."""


class JwtIdentityProvider(IdentityProvider):
    """Locally signed HS256 tokens.

    Role assignments are kept in the ``users`` collection and stamped into the
    next token issued for that subject, the same way a refreshed Firebase ID
    token picks up new custom claims.
    """

    def __init__(self, store: DocumentStore):
        self._store = store

    def verify_token(self, token: str) -> AuthenticatedUser:
        try:
            payload = jwt_handler.decode_access_token(token)
        except jwt.PyJWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

        uid = payload.get('sub')
        if not uid:
            raise InvalidTokenError('Token has no subject')
        return AuthenticatedUser(
            uid=uid,
            email=payload.get('email') or '',
            name=payload.get('name') or '',
            role=payload.get('role'),
        )

    def set_role(self, uid: str, role: str) -> None:
        if self._store.get(USERS_COLLECTION, uid) is None:
            self._store.create(USERS_COLLECTION, {'role': role}, doc_id=uid)
        else:
            self._store.update(USERS_COLLECTION, uid, {'role': role})

    def issue_token(self, uid: str, email: str = '', name: str = '') -> str:
        user = self._store.get(USERS_COLLECTION, uid) or {}
        return jwt_handler.create_access_token(
            subject=uid,
            email=email or user.get('email', ''),
            name=name or user.get('fullName', ''),
            role=user.get('role'),
        )


class FirebaseIdentityProvider(IdentityProvider):
    def __init__(self, app=None):
        if app is None:
            from clinic_backend.core.firebase import get_firebase_app
            app = get_firebase_app()
        self._app = app

    def verify_token(self, token: str) -> AuthenticatedUser:
        try:
            decoded = firebase_auth.verify_id_token(token, app=self._app)
        except (ValueError, firebase_auth.InvalidIdTokenError, firebase_exceptions.FirebaseError) as exc:
            raise InvalidTokenError(str(exc)) from exc

        return AuthenticatedUser(
            uid=decoded['uid'],
            email=decoded.get('email') or '',
            name=decoded.get('name') or '',
            role=decoded.get('role'),
        )

    def set_role(self, uid: str, role: str) -> None:
        try:
            firebase_auth.set_custom_user_claims(uid, {'role': role}, app=self._app)
        except firebase_exceptions.FirebaseError as exc:
            logger.error('Setting role claim for %s failed: %s', uid, exc)
            raise DataAccessError(f'Identity provider rejected role update: {exc}') from exc
        logger.info('Role %s assigned to %s', role, uid)
