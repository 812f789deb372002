"""Bearer token decoding

Tokens are issued by the identity provider and signed with JWT_SECRET.
A missing, malformed or expired token yields Anonymous; access rules then
decide whether the request may proceed.
"""

import logging
from typing import Optional
import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from config import ApplicationConfig
from src.domain.identity import Anonymous, Identity, identity_from_claims

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def decode_identity(token: str, secret: str, algorithm: str) -> Identity:
    try:
        claims = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError:
        logger.info("Expired identity token")
        return Anonymous()
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid identity token: {e}")
        return Anonymous()
    return identity_from_claims(claims)


async def get_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    if credentials is None:
        return Anonymous()
    return decode_identity(
        credentials.credentials,
        ApplicationConfig.JWT_SECRET,
        ApplicationConfig.JWT_ALGORITHM,
    )
