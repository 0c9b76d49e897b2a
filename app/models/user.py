"""ORM model for application users (registration, OTP verification, login)."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, false
from sqlalchemy.orm import relationship

from app.models.base import Base


class User(Base):
    """
    User account. Unverified while an OTP is pending; verified once the OTP is consumed.

    u_id is the public identifier derived from id after insert (e.g. USR-000042).
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    u_id = Column(String(32), nullable=True, unique=True)
    username = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    otp_code = Column(String(6), nullable=True)
    otp_expires_at = Column(DateTime(timezone=True), nullable=True)
    verified = Column(Boolean, nullable=False, default=False, server_default=false())

    role = relationship("Role", lazy="joined")
    tokens = relationship("Token", back_populates="user", cascade="all, delete-orphan")
