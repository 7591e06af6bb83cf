from .async_http_client import AsyncHttpClient
from .auth_store import AuthStore, StaticTokenProvider, TokenProvider
from .clients.auth import AuthClient
from .config import ClientConfig, ConfigError, load_config
from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    NotFoundError,
    PermissionError,
    RateLimitError,
    RequestCancelledError,
    ServerError,
    TransportError,
    ValidationError,
)
from .http_client import HttpClient
from .models import SessionData, TokenResponse, UserResponse
from .request import RequestDescriptor, build_descriptor
from .retry import RetryPolicy, is_retryable_status

__all__ = [
    "ApiError",
    "AsyncHttpClient",
    "AuthClient",
    "AuthError",
    "AuthStore",
    "ClientConfig",
    "ConfigError",
    "ConflictError",
    "HttpClient",
    "NotFoundError",
    "PermissionError",
    "RateLimitError",
    "RequestCancelledError",
    "RequestDescriptor",
    "RetryPolicy",
    "ServerError",
    "SessionData",
    "StaticTokenProvider",
    "TokenProvider",
    "TokenResponse",
    "TransportError",
    "UserResponse",
    "ValidationError",
    "build_descriptor",
    "is_retryable_status",
    "load_config",
]
