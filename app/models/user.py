"""
User model for authentication.

The username is the primary key and the subject of issued tokens; is_admin
grants access to the admin-only endpoints.
"""

from sqlalchemy import Boolean, Column, String, Text
from sqlalchemy.orm import relationship
from app.core.database import Base


class User(Base):
    __tablename__ = "users"

    username = Column(String(25), primary_key=True)
    hashed_password = Column(Text, nullable=False)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)

    applications = relationship("Application", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(username='{self.username}', is_admin={self.is_admin})>"
