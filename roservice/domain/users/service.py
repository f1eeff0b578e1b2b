"""User service - Registration, profiles and admin user management"""

import logging

from sqlalchemy.orm import Session

from ...errors import Conflict, NotFound, ValidationFailed
from ...models import Booking, Role, User
from ...security_utils import hash_password
from .schemas import UserProfileUpdate, UserSignup

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def count_admins(self) -> int:
        return self.db.query(User).filter(User.role == Role.ADMIN).count()

    def register(self, data: UserSignup) -> User:
        """
        Create an account

        Raises:
            Conflict: email already registered, or an ADMIN already exists
        """
        if data.role == Role.ADMIN and self.count_admins() > 0:
            raise Conflict("Admin already exists. Only one admin is allowed per system.")
        if self.db.query(User).filter(User.email == data.email).first():
            raise Conflict("User already exists")

        user = User(
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
            phone=data.phone,
            location=data.location,
            address=data.address,
            role=data.role,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"✅ User registered: {user.email} ({user.role.value})")
        return user

    def update_profile(self, user: User, data: UserProfileUpdate) -> User:
        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        if not updates:
            raise ValidationFailed("Nothing to update")

        password = updates.pop("password", None)
        if password:
            user.password_hash = hash_password(password)
        for field, value in updates.items():
            setattr(user, field, value)

        self.db.commit()
        self.db.refresh(user)
        return user

    def list_by_role(self, role: Role) -> list[User]:
        return self.db.query(User).filter(User.role == role).order_by(User.created_at.desc(), User.id.desc()).all()

    def delete_user(self, user_id: int, acting_admin: User) -> None:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFound("User not found")
        if user.id == acting_admin.id:
            raise Conflict("You cannot delete your own account")
        if self.db.query(Booking).filter(Booking.user_id == user.id).count():
            raise Conflict("User has bookings and cannot be deleted")

        self.db.delete(user)
        self.db.commit()
        logger.info(f"🗑️ User {user_id} deleted by admin {acting_admin.id}")
