"""
Bearer-token and internal-service authentication.

Crew members sign in through the identity provider which issues HS256
JWTs. The ``sub`` claim is the account id every pilot, role and identity
row is keyed by. Roles granted inside the crew center (``UserRole``) are
merged into the token's own ``roles`` claim on every request.
"""

import hmac
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

import jwt
from django.conf import settings
from rest_framework import authentication, exceptions

logger = logging.getLogger(__name__)


def decode_access_token(token: str) -> Dict:
    """
    Verify signature, issuer and required claims.

    Raises:
        AuthenticationFailed: expired, forged or malformed token
    """
    config = settings.JWT_SETTINGS
    try:
        payload = jwt.decode(
            token,
            config['VERIFYING_KEY'],
            algorithms=[config['ALGORITHM']],
            issuer=config['ISSUER'],
            options={'require': ['exp', 'iat', 'sub', 'iss']},
        )
    except jwt.ExpiredSignatureError:
        raise exceptions.AuthenticationFailed('Token has expired')
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise exceptions.AuthenticationFailed('Invalid token')

    try:
        uuid.UUID(str(payload['sub']))
    except ValueError:
        raise exceptions.AuthenticationFailed('Invalid token subject')
    return payload


class JWTAuthentication(authentication.BaseAuthentication):
    keyword = 'Bearer'

    def authenticate(self, request):
        parts = authentication.get_authorization_header(request).split()
        if not parts or parts[0].lower() != self.keyword.lower().encode():
            return None
        if len(parts) != 2:
            raise exceptions.AuthenticationFailed('Authorization header must be "Bearer <token>"')

        try:
            token = parts[1].decode()
        except UnicodeDecodeError:
            raise exceptions.AuthenticationFailed('Invalid token header encoding')

        payload = decode_access_token(token)
        return TokenUser(payload, extra_roles=self.stored_roles(payload['sub'])), payload

    @staticmethod
    def stored_roles(user_id: str) -> List[str]:
        from apps.pilots.models import UserRole

        return list(UserRole.objects.filter(user_id=user_id).values_list('role', flat=True))

    def authenticate_header(self, request) -> str:
        return self.keyword


class ServiceAuthentication(authentication.BaseAuthentication):
    """``X-Service-Auth`` shared secret used by cron runners."""

    def authenticate(self, request):
        provided = request.headers.get('X-Service-Auth')
        if not provided:
            return None

        expected = settings.SERVICE_AUTH_TOKEN or ''
        if not expected or not hmac.compare_digest(provided.encode(), expected.encode()):
            raise exceptions.AuthenticationFailed('Invalid service token')

        caller = request.headers.get('X-Source-Service', 'unknown')
        return ServiceUser(caller), {'service': caller}


class TokenUser:
    """Signed-in crew center account; nothing is loaded from ``auth.User``."""

    is_service = False
    is_active = True
    is_authenticated = True
    is_anonymous = False

    def __init__(self, payload: Dict, extra_roles: Optional[List[str]] = None):
        self.payload = payload
        self.id = str(payload['sub'])
        self.email = (payload.get('email') or '').lower() or None
        self.roles = sorted(set(payload.get('roles') or []) | set(extra_roles or []))

    def __str__(self) -> str:
        return self.email or self.id

    @property
    def is_admin(self) -> bool:
        return 'admin' in self.roles


class ServiceUser:
    is_service = True
    is_active = True
    is_authenticated = True
    is_anonymous = False
    is_admin = False
    email = None
    roles: List[str] = []

    def __init__(self, service_name: str):
        self.service_name = service_name
        self.id = f"service:{service_name}"

    def __str__(self) -> str:
        return self.id


class JWTTokenGenerator:
    """Issue tokens shaped like the identity provider's, for tests and tooling."""

    @staticmethod
    def generate_access_token(user_id, email: str = None, roles: list = None, **claims) -> str:
        config = settings.JWT_SETTINGS
        issued = datetime.now(timezone.utc)
        payload = {
            'sub': str(user_id),
            'email': email,
            'roles': list(roles or []),
            'iat': issued,
            'exp': issued + config['ACCESS_TOKEN_LIFETIME'],
            'iss': config['ISSUER'],
            **claims,
        }
        return jwt.encode(payload, config['SIGNING_KEY'], algorithm=config['ALGORITHM'])
