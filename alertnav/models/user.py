"""User Model"""
from sqlalchemy import Column, Integer, String, DateTime
from alertnav.database import Base


class User(Base):
    """Map user, created on first login"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)  # Always lowercase
    created_at = Column(DateTime, nullable=False)
    last_login = Column(DateTime)
