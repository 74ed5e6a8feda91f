import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from typing import List
from groupchat.api.dependencies import get_storage
from groupchat.schemas import OnlineUserResponse, UpdateProfile, UserResponse
from groupchat.storage.chat_storage import ChatStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

USER_NOT_FOUND_MESSAGE = "User not found"

# Static paths are registered before /{user_id} so "count" and "online"
# are never parsed as an id


@router.get("", response_model=List[UserResponse])
def list_users(storage: ChatStorage = Depends(get_storage)):
    """List every registered user"""
    return storage.get_all_users()


@router.get("/count", response_model=int)
def users_count(storage: ChatStorage = Depends(get_storage)):
    """Number of users currently online"""
    return storage.get_users_count()


@router.get("/count/total", response_model=int)
def total_users_count(storage: ChatStorage = Depends(get_storage)):
    """Number of registered users, online or not"""
    return storage.get_total_users_count()


@router.get("/online", response_model=List[OnlineUserResponse])
def online_users(storage: ChatStorage = Depends(get_storage)):
    """All users with their last heartbeat and online flag"""
    return storage.get_online_users()


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, storage: ChatStorage = Depends(get_storage)):
    """Get a user's public profile"""
    user = storage.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail=USER_NOT_FOUND_MESSAGE)
    return user


@router.put("/{user_id}/profile", response_model=UserResponse)
def update_profile(
    user_id: int,
    patch: UpdateProfile,
    storage: ChatStorage = Depends(get_storage)
):
    """Update profile fields present in the body"""
    try:
        user = storage.update_user_profile(user_id, patch)
    except SQLAlchemyError as e:
        storage.db.rollback()
        logger.error(f"Error updating profile for user {user_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update profile"
        )

    if not user:
        raise HTTPException(status_code=404, detail=USER_NOT_FOUND_MESSAGE)
    return user


@router.post("/{user_id}/activity")
def record_activity(user_id: int, storage: ChatStorage = Depends(get_storage)):
    """Heartbeat - marks the user as active now"""
    try:
        recorded = storage.update_user_activity(user_id)
    except SQLAlchemyError as e:
        storage.db.rollback()
        logger.error(f"Error updating activity for user {user_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update activity"
        )

    if not recorded:
        raise HTTPException(status_code=404, detail=USER_NOT_FOUND_MESSAGE)
    return {"success": True}
