from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ..async_http_client import AsyncHttpClient
from ..auth_store import AuthStore
from ..exceptions import ApiError
from ..logging_setup import get_logger
from ..models import MeResponse, SessionData, TokenResponse, UserResponse

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse(model: type[ModelT], data: Any, path: str) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ApiError(
            code="INVALID_RESPONSE",
            message=f"Unexpected response shape from {path}",
            details={"errors": exc.errors(include_url=False)},
            status_code=0,
        ) from exc


@dataclass
class AuthClient:
    """Owns the token lifecycle: it is the only writer of the auth store."""

    http: AsyncHttpClient
    store: AuthStore

    async def register(self, email: str, password: str) -> UserResponse | None:
        path = "/api/auth/register"
        data = await self.http.request(path, method="POST", body={"email": email, "password": password})
        return self._establish(_parse(TokenResponse, data, path))

    async def login(self, email: str, password: str) -> UserResponse | None:
        path = "/api/auth/login"
        data = await self.http.request(path, method="POST", body={"email": email, "password": password})
        return self._establish(_parse(TokenResponse, data, path))

    async def me(self) -> UserResponse:
        path = "/api/auth/me"
        data = await self.http.request(path)
        return _parse(MeResponse, data, path).user

    async def restore(self) -> UserResponse | None:
        """Revalidate a persisted token; drop it when it cannot be confirmed."""
        if not self.store.get_token():
            return None
        try:
            return await self.me()
        except ApiError as exc:
            logger.warning("Stored session rejected (%s); clearing token", exc.code)
            self.store.clear()
            return None

    def logout(self) -> None:
        self.store.clear()

    async def update_password(self, password: str) -> None:
        raise ApiError(
            code="NOT_SUPPORTED",
            message="Password change is not supported by the backend",
            details=None,
            status_code=0,
        )

    def _establish(self, token: TokenResponse) -> UserResponse | None:
        self.store.save(
            SessionData(
                access_token=token.token,
                user=token.user,
                env_name=self.http.config.env_name,
            )
        )
        return token.user
