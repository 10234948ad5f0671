"""Compute endpoints and the REST route table that fronts them."""

from dataclasses import dataclass
from typing import Optional

from topology.errors import RouteConflictError

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})


@dataclass(frozen=True)
class Endpoint:
    """
    One deployable function.

    Attributes:
        identifier: Construct id of the function, unique within the plan
        handler: Entry point as `module.function`
        asset_dir: Directory packaged as the function code
        runtime: Lambda runtime name
    """
    identifier: str
    handler: str
    asset_dir: str
    runtime: str = "python3.12"

    def __post_init__(self) -> None:
        if not self.identifier:
            raise RouteConflictError("endpoint identifier must not be empty")
        module, _, function = self.handler.rpartition(".")
        if not module or not function:
            raise RouteConflictError(
                f"endpoint {self.identifier!r}: handler must look like module.function, got {self.handler!r}"
            )


@dataclass(frozen=True)
class Route:
    path: str
    method: str
    endpoint: str

    def __post_init__(self) -> None:
        if not self.path.startswith("/") or self.path == "/" or self.path.endswith("/"):
            raise RouteConflictError(f"route path must be absolute without trailing slash, got {self.path!r}")
        method = self.method.upper()
        if method not in HTTP_METHODS:
            raise RouteConflictError(f"unsupported method {self.method!r} for {self.path}")
        object.__setattr__(self, "method", method)

    @property
    def resource_path(self) -> str:
        """Path relative to the API root, as API Gateway resources expect."""
        return self.path.lstrip("/")


@dataclass(frozen=True)
class RouteTable:
    """
    Ordered routes. No two routes may share the same (path, method) pair.
    """
    routes: tuple[Route, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "routes", tuple(self.routes))
        seen: set[tuple[str, str]] = set()
        for route in self.routes:
            key = (route.path, route.method)
            if key in seen:
                raise RouteConflictError(f"duplicate route {route.method} {route.path}")
            seen.add(key)

    def resolve(self, path: str, method: str) -> Optional[str]:
        """Return the endpoint serving `method path`, or None when it is not routed."""
        method = method.upper()
        for route in self.routes:
            if route.path == path and route.method == method:
                return route.endpoint
        return None

    @property
    def endpoints(self) -> frozenset[str]:
        return frozenset(route.endpoint for route in self.routes)
