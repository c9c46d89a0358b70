"""
API versioning middleware for the Catalog Service.
The version is resolved from the URL path (/api/v1/..., /api/v2/...), then the
X-API-Version header, then the default.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, List, Optional

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ...schemas.common import ApiResponse

if TYPE_CHECKING:
    from fastapi import FastAPI


class APIVersion:
    """API Version representation"""

    def __init__(self, major: int, minor: int = 0):
        self.major = major
        self.minor = minor

    def __str__(self) -> str:
        return f"v{self.major}.{self.minor}"

    def __repr__(self) -> str:
        return f"APIVersion({self.major}, {self.minor})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, APIVersion):
            return NotImplemented
        return (self.major, self.minor) == (other.major, other.minor)

    def __hash__(self) -> int:
        return hash((self.major, self.minor))

    def to_header_value(self) -> str:
        return f"{self.major}.{self.minor}"

    @classmethod
    def from_string(cls, version_str: str) -> "APIVersion":
        """Parse version string like 'v2', '1.0' or 'v2.0'"""
        parts = version_str.strip().lstrip("v").split(".")
        major = int(parts[0])
        minor = int(parts[1]) if len(parts) > 1 else 0
        return cls(major, minor)

    def is_compatible_with(self, other: "APIVersion") -> bool:
        # Same major version is compatible
        return self.major == other.major


class APIVersioningMiddleware(BaseHTTPMiddleware):
    """Resolve the requested API version and echo it in response headers"""

    def __init__(
        self,
        app: FastAPI,
        default_version: str = "1.0",
        supported_versions: Optional[List[str]] = None,
    ):
        super().__init__(app)
        self.default_version = APIVersion.from_string(default_version)
        self.supported_versions = [
            APIVersion.from_string(v) for v in (supported_versions or ["1.0", "2.0"])
        ]

    async def dispatch(self, request: Request, call_next: Callable) -> Response:  # type: ignore[misc]
        version = self._extract_version(request)

        if version is None or not self._is_supported_version(version):
            body = ApiResponse.error_response(
                "Unsupported API version",
                [f"Supported versions: {self._supported_header()}"],
            )
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump()
            )

        request.state.api_version = version

        response = await call_next(request)  # type: ignore[misc]
        response.headers["X-API-Version"] = version.to_header_value()  # type: ignore[misc]
        response.headers["X-Supported-Versions"] = self._supported_header()  # type: ignore[misc]
        return response  # type: ignore[misc]

    def _supported_header(self) -> str:
        return ", ".join(v.to_header_value() for v in self.supported_versions)

    def _extract_version(self, request: Request) -> Optional[APIVersion]:
        """Extract API version from request; None when it cannot be parsed"""
        path = request.url.path
        if path.startswith("/api/v"):
            version_part = path.split("/api/v", 1)[1].split("/")[0]
            try:
                return APIVersion.from_string(version_part)
            except ValueError:
                return None

        version_header = request.headers.get("X-API-Version")
        if version_header:
            try:
                return APIVersion.from_string(version_header)
            except ValueError:
                return None

        return self.default_version

    def _is_supported_version(self, version: APIVersion) -> bool:
        return any(version.is_compatible_with(v) for v in self.supported_versions)


def get_api_version(request: Request) -> APIVersion:
    """Get API version from request state"""
    api_version = getattr(request.state, "api_version", None)
    return api_version if api_version is not None else APIVersion(1, 0)
