from __future__ import annotations

from typing import Optional

from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

bearer = HTTPBearer(auto_error=False)


def verify_token(
    credentials: Optional[HTTPAuthorizationCredentials],
    expected: Optional[str],
    *,
    required: bool,
) -> None:
    """Raise PermissionError unless the bearer token matches `expected`.

    When no token is configured the check passes only if `required` is False.
    """
    if not expected:
        if required:
            raise PermissionError("Endpoint disabled: no token configured")
        return
    provided = credentials.credentials if credentials is not None else ""
    if provided != expected:
        raise PermissionError("Unauthorized")
