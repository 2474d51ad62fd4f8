"""
User lookup schemas (check-user function).
"""

from pydantic import BaseModel
from typing import List, Optional


class LookupAccount(BaseModel):
    id: int
    email: str


class LookupProfile(BaseModel):
    user_id: int
    first_name: str
    middle_name: Optional[str] = None
    surname_1: str
    surname_2: Optional[str] = None
    id_number: str
    phone: str
    address: str
    
    class Config:
        from_attributes = True


class UserLookupResponse(BaseModel):
    """
    Result of looking an account up by email.
    
    When exists is False no other field is sent.
    """
    exists: bool
    user: Optional[LookupAccount] = None
    profile: Optional[LookupProfile] = None
    roles: List[str] = []
