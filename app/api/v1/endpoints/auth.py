from fastapi import APIRouter
from pydantic import BaseModel

from app.api.deps import CurrentUser

router = APIRouter(tags=["Authentication"])


class ProfileResponse(BaseModel):
    id: int
    username: str
    name: str
    role: str


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(current_user: CurrentUser):
    """
    Get the current user's profile as resolved by the identity provider.
    """
    return ProfileResponse(
        id=current_user.id,
        username=current_user.username,
        name=current_user.name,
        role=current_user.role,
    )
