"""
Users API Endpoints
The current user's profile
"""
from fastapi import APIRouter, Depends, HTTPException

from app.core.auth import TokenUser, get_current_user
from app.core.exceptions import MarketplaceError, status_code_for
from app.domain.user import UserUpdate
from app.repositories.user_repository import UserRepository

router = APIRouter()


# Dependency: Get user repository
def get_user_repository() -> UserRepository:
    return UserRepository()


@router.get("/me")
async def get_me(
    user: TokenUser = Depends(get_current_user),
    repo: UserRepository = Depends(get_user_repository)
):
    """Get the current user's profile"""
    try:
        profile = repo.find_by_id(user.id)
        if not profile:
            raise HTTPException(status_code=404, detail="User not found")

        return {
            "status": "success",
            "data": profile.to_dict()
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching user: {str(e)}")


@router.patch("/me")
async def update_me(
    request: UserUpdate,
    user: TokenUser = Depends(get_current_user),
    repo: UserRepository = Depends(get_user_repository)
):
    """Update username, location, city or province of the current user"""
    try:
        profile = repo.update_profile(user.id, request)

        return {
            "status": "success",
            "data": profile.to_dict()
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating user: {str(e)}")
