"""Client accounts: admin provisioning and self-service profile."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from coachdesk.core.database import get_db
from coachdesk.dependencies.auth import get_current_admin, get_current_user, require_ownership
from coachdesk.schemas.auth import TokenClaims
from coachdesk.schemas.common import ErrorResponse
from coachdesk.schemas.user import ClientCreate, ClientUpdate, ProfileUpdate, UserRead
from coachdesk.services.user_service import UserService
from coachdesk.utils.helpers import format_response

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)


def _read(user) -> dict:
    return UserRead.model_validate(user).model_dump(mode="json")


@router.get("/me")
async def get_profile(
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return format_response(_read(UserService.get_user(db, current_user.user_id)))


@router.patch("/me")
async def update_profile(
    request: ProfileUpdate,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = UserService.update_profile(db, current_user.user_id, name=request.name)
    return format_response(_read(user))


@router.get("/clients")
async def list_clients(
    current_admin: TokenClaims = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return format_response([_read(u) for u in UserService.list_clients(db)])


@router.post("/clients", status_code=201, responses={409: {"model": ErrorResponse}})
async def create_client(
    request: ClientCreate,
    current_admin: TokenClaims = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    user = UserService.create_user(db, email=request.email, name=request.name, password=request.password)
    return format_response(_read(user))


@router.get("/clients/{client_id}", responses={404: {"model": ErrorResponse}})
async def get_client(
    client_id: str,
    current_user: TokenClaims = Depends(require_ownership("client_id")),
    db: Session = Depends(get_db),
):
    return format_response(_read(UserService.get_client(db, client_id)))


@router.patch("/clients/{client_id}", responses={404: {"model": ErrorResponse}})
async def update_client(
    client_id: str,
    request: ClientUpdate,
    current_admin: TokenClaims = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    user = UserService.update_client(db, client_id, name=request.name, active=request.active)
    return format_response(_read(user))


@router.delete("/clients/{client_id}", responses={404: {"model": ErrorResponse}})
async def deactivate_client(
    client_id: str,
    current_admin: TokenClaims = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """Soft delete: the row is kept and the account is deactivated."""
    user = UserService.update_client(db, client_id, active=False)
    return format_response(_read(user))
