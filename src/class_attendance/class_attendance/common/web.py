from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import g, request

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..users.model import SessionUser


def current_identity() -> SessionUser:
    identity: Optional[SessionUser] = g.get("identity")
    if identity is None:
        raise AuthenticationError("Unauthorized")
    return identity


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_identity()
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    """Capability check done before any service call. ADMIN passes every gate."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            identity = current_identity()
            if identity.role != Role.ADMIN and identity.role not in roles:
                raise AuthorizationError("Forbidden")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def query_arg(name: str) -> Optional[str]:
    value = request.args.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()
