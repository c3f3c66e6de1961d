from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from notekeeper.models.users import OwnerOut


class NoteStatus(str, Enum):
    PENDING = "pending"
    DONE = "done"


class NoteCreate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=200)
    content: Optional[str] = Field(default=None, max_length=50_000)
    status: Optional[NoteStatus] = None


class NoteUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=200)
    content: Optional[str] = Field(default=None, max_length=50_000)
    status: Optional[NoteStatus] = None


class NoteOut(BaseModel):
    id: str
    user_id: str
    title: str
    content: str
    status: NoteStatus
    created_at: str
    updated_at: str
    owner: Optional[OwnerOut] = None


class NoteResponse(BaseModel):
    message: str
    note: NoteOut


class NoteListResponse(BaseModel):
    message: str
    count: int
    notes: list[NoteOut]


class NoteDeleted(BaseModel):
    message: str
    noteId: str
