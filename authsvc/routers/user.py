from fastapi import APIRouter, Depends, Response, status

from authsvc.dependencies.auth import Identity, get_current_identity
from authsvc.dependencies.services import get_user_service
from authsvc.models.user import UserCreate, UserPublic, UserUpdate
from authsvc.services.user_service import UserService

user_router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(get_current_identity)],
)


@user_router.post("", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def create_user(body: UserCreate, users: UserService = Depends(get_user_service)):
    return users.create(body)


@user_router.get("/me", response_model=UserPublic)
def get_me(
    identity: Identity = Depends(get_current_identity),
    users: UserService = Depends(get_user_service),
):
    return users.get(identity.user_id)


@user_router.get("/{user_id}", response_model=UserPublic)
def get_user(user_id: str, users: UserService = Depends(get_user_service)):
    return users.get(user_id)


@user_router.patch("/{user_id}", response_model=UserPublic)
def update_user(user_id: str, body: UserUpdate, users: UserService = Depends(get_user_service)):
    return users.update(user_id, body)


@user_router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: str, users: UserService = Depends(get_user_service)):
    """Deletes the user and every refresh token record it owns."""
    users.delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
