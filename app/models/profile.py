"""
Profile model (one per identity, provisioned on registration)
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    employee_code = Column(String, unique=True, nullable=False, index=True)  # EMP0001, never reassigned
    department = Column(String, nullable=False)
    role = Column(String, nullable=False, default="employee")  # primary role shown in the UI
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    user = relationship("User", back_populates="profile")
