import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from groupchat.api.dependencies import get_storage
from groupchat.schemas import SignInData, SignUpData, UserResponse
from groupchat.storage.chat_storage import ChatStorage, UserConflictError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def signup(sign_up: SignUpData, storage: ChatStorage = Depends(get_storage)):
    """Register a new user"""
    try:
        # A single insert - the unique constraints on email and username
        # reject duplicates, including two sign-ups racing each other
        user = storage.create_user(sign_up)
    except UserConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except SQLAlchemyError as e:
        storage.db.rollback()
        logger.error(f"Error creating user: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create account"
        )
    # response_model drops the password hash
    return user


@router.post("/signin", response_model=UserResponse)
def signin(credentials: SignInData, storage: ChatStorage = Depends(get_storage)):
    """Sign in with email and password"""
    user = storage.authenticate_user(credentials)

    # Same message for unknown email and wrong password - can't tell which
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    # Signing in counts as activity so the user shows up online right away
    try:
        storage.update_user_activity(user.id)
    except SQLAlchemyError as e:
        storage.db.rollback()
        logger.error(f"Error recording sign-in activity for user {user.id}: {str(e)}")

    return user
