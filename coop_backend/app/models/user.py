"""
User account, profile and role assignment models.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from coop_backend.app.db.session import Base
from coop_backend.app.models.enums import AppRole


class User(Base):
    """
    Authentication account.
    
    Emails are stored lowercase; lookups normalise their input the same way.
    """
    __tablename__ = "users"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"


class Profile(Base):
    """Personal data attached to an account (one per user)."""
    __tablename__ = "profiles"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False, index=True)
    
    first_name = Column(String(100), nullable=False)
    middle_name = Column(String(100), nullable=True)
    surname_1 = Column(String(100), nullable=False)
    surname_2 = Column(String(100), nullable=True)
    
    id_number = Column(String(20), unique=True, nullable=False, index=True)  # national ID (cédula)
    phone = Column(String(30), nullable=False)
    address = Column(String(255), nullable=False)
    avatar_url = Column(String(500), nullable=True)
    
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.surname_1}"
    
    def __repr__(self):
        return f"<Profile(user_id={self.user_id}, name='{self.display_name}')>"


class UserRoleAssignment(Base):
    """One role held by one user."""
    __tablename__ = "user_roles"
    __table_args__ = (
        UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
    )
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role = Column(Enum(AppRole), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<UserRoleAssignment(user_id={self.user_id}, role='{self.role.value}')>"
