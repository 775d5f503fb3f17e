from reelreview.exceptions import Conflict
from reelreview.schemas.auth import UserRegister, UserLogin, UserUpdate
from reelreview.schemas.user import User
from reelreview.storage.base import EntityStore
from reelreview.utils.security import hash_password, verify_password, create_access_token, ACCESS_TOKEN_EXPIRE_MINUTES
from fastapi import HTTPException, status
from datetime import timedelta
from typing import Optional
import logging

logger = logging.getLogger(__name__)

class AuthService:
    @staticmethod
    def register_user(store: EntityStore, user_data: UserRegister) -> User:
        with store.transaction():
            # Check existing username / email
            if store.get_user_by_username(user_data.username):
                raise Conflict("Username already exists")
            if store.get_user_by_email(user_data.email):
                raise Conflict("Email already registered")

            # Create user
            new_user = store.create_user({
                "username": user_data.username,
                "email": user_data.email,
                "password_hash": hash_password(user_data.password),
                "profile_picture": user_data.profile_picture
            })

        logger.info(f"Registered user {new_user.username}")
        return new_user
    

    @staticmethod
    def login_user(store: EntityStore, credentials: UserLogin) -> dict:
        # Find user
        user = store.get_user_by_username(credentials.username)
        
        if not user:
            logger.warning(f"Login failed: User not found with username {credentials.username}")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
        
        if not verify_password(credentials.password, user.password_hash):
            logger.warning(f"Login failed: Incorrect password for username {credentials.username}")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

        # Create token
        access_token = create_access_token(
            user,
            expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
        )

        return {
            "access_token": access_token,
            "token_type": "bearer",
            "expires_in": ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            "user": user
        }

    @staticmethod
    def update_profile(store: EntityStore, user_id: str, update_data: UserUpdate) -> Optional[User]:
        """Update username/email/picture, re-checking uniqueness of the new values"""
        fields = update_data.model_dump(exclude_unset=True)
        # username and email can change but never be cleared
        fields = {k: v for k, v in fields.items() if v is not None or k == "profile_picture"}

        with store.transaction():
            if "username" in fields:
                holder = store.get_user_by_username(fields["username"])
                if holder and holder.id != user_id:
                    raise Conflict("Username already exists")
            if "email" in fields:
                holder = store.get_user_by_email(fields["email"])
                if holder and holder.id != user_id:
                    raise Conflict("Email already registered")

            return store.update_user(user_id, fields)
