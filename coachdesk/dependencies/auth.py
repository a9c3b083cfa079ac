from fastapi import Depends, Request
from fastapi.security import HTTPBearer
from sqlalchemy.orm import Session
from coachdesk.core.constants import UserRole
from coachdesk.core.database import get_db
from coachdesk.schemas.auth import TokenClaims
from coachdesk.services.access_guard import AccessGuard

# auto_error=False: a missing header must surface as our own UNAUTHENTICATED error.
# Declared so the OpenAPI schema advertises bearer auth.
security = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    _credentials=Depends(security),
    db: Session = Depends(get_db),
) -> TokenClaims:
    """Verify the access token and attach the claims to `request.state.principal`."""
    claims = AccessGuard.authenticate(db, request.headers.get("authorization"))
    request.state.principal = claims
    return claims


def require_role(*roles: UserRole):
    """Dependency factory: current user must hold one of `roles`."""
    allowed = frozenset(roles)

    async def dependency(current_user: TokenClaims = Depends(get_current_user)) -> TokenClaims:
        return AccessGuard.require_role(current_user, allowed)

    return dependency


get_current_admin = require_role(UserRole.ADMIN)


async def _json_field(request: Request, field: str):
    if request.method in ("GET", "HEAD", "DELETE"):
        return None
    try:
        body = await request.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get(field)
    return None


def require_ownership(field: str = "client_id"):
    """Dependency factory: non-admins may only touch records they own.

    The owner id is read from the path parameter `field`, falling back to the
    JSON body field of the same name.
    """

    async def dependency(
        request: Request,
        current_user: TokenClaims = Depends(get_current_user),
    ) -> TokenClaims:
        owner_id = request.path_params.get(field)
        if owner_id is None:
            owner_id = await _json_field(request, field)
        return AccessGuard.require_ownership(current_user, owner_id)

    return dependency
