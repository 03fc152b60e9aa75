"""Helpers for declaring documented routes in code.

    routes = [
        post("/auth/login", summary="Login user", tags=["Authentication"], body=login_schema),
        get("/users/{id}", summary="Get user by ID", params=user_params, auth=True),
    ]
"""

from schema_bridge.parser.base import RouteDeclaration


def route(method: str, path: str, **config) -> RouteDeclaration:
    """Declare a route. ``config`` takes any RouteDeclaration field."""
    return RouteDeclaration(method=method, path=path, **config)


def get(path: str, **config) -> RouteDeclaration:
    return route("GET", path, **config)


def post(path: str, **config) -> RouteDeclaration:
    return route("POST", path, **config)


def put(path: str, **config) -> RouteDeclaration:
    return route("PUT", path, **config)


def patch(path: str, **config) -> RouteDeclaration:
    return route("PATCH", path, **config)


def delete(path: str, **config) -> RouteDeclaration:
    return route("DELETE", path, **config)
