"""
Role Request database model.

Members ask for additional roles; administrators approve or reject them.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum
from sqlalchemy.sql import func
from coop_backend.app.db.session import Base
from coop_backend.app.models.enums import AppRole, RoleRequestStatus


class RoleRequest(Base):
    __tablename__ = "role_requests"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    requester_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    requested_role = Column(Enum(AppRole), nullable=False)
    justification = Column(Text, nullable=False)
    
    status = Column(Enum(RoleRequestStatus), default=RoleRequestStatus.PENDING, nullable=False, index=True)
    
    # Review
    reviewed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(String(500), nullable=True)
    
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<RoleRequest(id={self.id}, requester={self.requester_id}, role='{self.requested_role.value}', status='{self.status.value}')>"
