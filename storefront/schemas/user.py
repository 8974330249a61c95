from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import datetime


class UserBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class UserCreate(UserBase):
    password: str = Field(..., min_length=1)
    password_confirmation: Optional[str] = None

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password_confirmation is not None and self.password != self.password_confirmation:
            raise ValueError("Password confirmation doesn't match Password")
        return self


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    password: Optional[str] = Field(None, min_length=1)
    password_confirmation: Optional[str] = None

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password is not None and self.password_confirmation is not None:
            if self.password != self.password_confirmation:
                raise ValueError("Password confirmation doesn't match Password")
        return self


class UserResponse(UserBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True
