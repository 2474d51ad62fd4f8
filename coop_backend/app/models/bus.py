"""
Bus database model.

A cooperative bus belongs to a partner (owner) and can be assigned a
driver and an official for the day.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum
from sqlalchemy.sql import func
from coop_backend.app.db.session import Base
from coop_backend.app.models.enums import BusStatus


class Bus(Base):
    __tablename__ = "buses"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    
    # Identification
    plate = Column(String(20), unique=True, nullable=False, index=True)
    alias = Column(String(100), nullable=True)
    image_url = Column(String(500), nullable=True)
    capacity = Column(Integer, nullable=True)
    
    status = Column(Enum(BusStatus), default=BusStatus.AVAILABLE, nullable=False, index=True)
    
    # Ownership and daily assignments
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    driver_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    official_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    
    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<Bus(id={self.id}, plate='{self.plate}', status='{self.status.value}')>"
