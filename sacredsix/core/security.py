"""Access token verification."""

import logging

import jwt
from fastapi import HTTPException, status
from jwt import InvalidTokenError

from sacredsix.core.config import settings

logger = logging.getLogger(__name__)


class TokenAuthenticator:
    """
    Verifies bearer tokens issued by the identity provider.

    Tokens are JWTs signed with the shared ``auth_secret_key``. The ``sub``
    claim identifies the user; ``email`` and ``name`` are used the first time
    a user is seen.

    :ivar secret_key: The key used to verify token signatures.
    :type secret_key: str
    :ivar algorithm: The expected signing algorithm.
    :type algorithm: str
    """

    def __init__(
        self,
        secret_key: str | None = None,
        algorithm: str | None = None,
        audience: str | None = None,
    ):
        self.secret_key = secret_key or settings.auth_secret_key
        self.algorithm = algorithm or settings.auth_algorithm
        self.audience = audience if audience is not None else settings.auth_audience

    def verify_token(self, token: str) -> dict:
        """
        Decode and verify a token, returning its claims.

        :param token: The encoded JWT.
        :return: The decoded payload.
        :raises HTTPException: 401 when the token is malformed, expired or
            signed with another key.
        """
        try:
            return jwt.decode(
                token,
                key=self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                options={"verify_aud": self.audience is not None, "require": ["sub"]},
            )
        except InvalidTokenError as e:
            logger.info(f"Rejected access token: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid authentication token: {str(e)}",
                headers={"WWW-Authenticate": "Bearer"},
            ) from e

    def issue_token(self, subject: str, **claims) -> str:
        """Sign a token for ``subject``; used by tests and local tooling."""
        payload = {"sub": subject, **claims}
        if self.audience is not None:
            payload.setdefault("aud", self.audience)
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
