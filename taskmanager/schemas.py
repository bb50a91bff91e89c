from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from taskmanager.models import TaskPriority, TaskStatus


# Authentication API models
class UserRegister(BaseModel):
    username: str = Field(
        ..., min_length=3, max_length=50, description="Username for the new account"
    )
    email: EmailStr = Field(..., description="Email address for the new account")
    # Strength rules are enforced by the user service, not here
    password: str = Field(
        ..., min_length=1, max_length=72, description="Password for the new account"
    )


class UserLogin(BaseModel):
    username: str = Field(..., description="Username or email for login")
    password: str = Field(..., description="Password for login")


class Token(BaseModel):
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")


class UserInfo(BaseModel):
    id: UUID = Field(..., description="User unique identifier")
    username: str = Field(..., description="Username")
    email: str = Field(..., description="Email address")
    created_at: datetime = Field(..., description="Account creation timestamp")

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str = Field(..., description="Response message")


# Task-related API models
class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200, description="Task title")
    description: str | None = Field(
        None, max_length=2000, description="Optional task details"
    )
    due_date: datetime | None = Field(None, description="Optional due date")
    status: TaskStatus = Field(TaskStatus.PENDING, description="Task status")
    priority: TaskPriority = Field(TaskPriority.MEDIUM, description="Task priority")

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title must not be blank")
        return value


class TaskUpdate(TaskCreate):
    """Full replacement of the editable fields."""


class TaskResponse(BaseModel):
    id: UUID
    title: str
    description: str | None = None
    due_date: datetime | None = None
    status: TaskStatus
    priority: TaskPriority
    owner_id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
