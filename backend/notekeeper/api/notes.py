import logging
import uuid
from uuid import UUID

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from notekeeper.deps import get_notes_store, get_users_store
from notekeeper.errors import NotFound, ValidationError
from notekeeper.models.notes import (
    NoteCreate,
    NoteDeleted,
    NoteListResponse,
    NoteOut,
    NoteResponse,
    NoteStatus,
    NoteUpdate,
)
from notekeeper.models.users import OwnerOut
from notekeeper.storage.notes_store import Note, NotesStore
from notekeeper.storage.users_store import UsersStore
from notekeeper.utils.access import AuthContext, authorize_note, get_auth_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/note", tags=["note"])


def _note_out(note: Note, users: UsersStore | None = None) -> NoteOut:
    owner = users.get(note.user_id) if users is not None else None
    return NoteOut(
        **note.to_dict(),
        owner=OwnerOut(id=owner.id, name=owner.name, email=owner.email, role=owner.role) if owner else None,
    )


def _load_note(notes: NotesStore, note_id: UUID) -> Note:
    note = notes.get_note(uuid.UUID(str(note_id)))
    if note is None:
        raise NotFound("Note not found")
    return note


@router.get("/health-check", response_class=PlainTextResponse)
def health_check() -> str:
    return "Note Route OK"


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
def create_note(
    payload: NoteCreate,
    ctx: AuthContext = Depends(get_auth_context),
    notes: NotesStore = Depends(get_notes_store),
) -> NoteResponse:
    if not payload.title or not payload.content:
        raise ValidationError("Title and content are required")

    note = notes.create_note(
        user_id=ctx.user_id,
        title=payload.title,
        content=payload.content,
        status=payload.status or NoteStatus.PENDING,
    )
    logger.info("User %s created note %s", ctx.user_id, note.id)
    return NoteResponse(message="Note created successfully", note=_note_out(note))


@router.get("", response_model=NoteListResponse)
def list_notes(
    ctx: AuthContext = Depends(get_auth_context),
    notes: NotesStore = Depends(get_notes_store),
    users: UsersStore = Depends(get_users_store),
) -> NoteListResponse:
    # admins see every note
    found = notes.list_notes(user_id=None if ctx.is_admin else ctx.user_id)
    return NoteListResponse(
        message="Notes retrieved successfully",
        count=len(found),
        notes=[_note_out(n, users) for n in found],
    )


@router.get("/{note_id}", response_model=NoteResponse)
def get_note(
    note_id: UUID,
    ctx: AuthContext = Depends(get_auth_context),
    notes: NotesStore = Depends(get_notes_store),
    users: UsersStore = Depends(get_users_store),
) -> NoteResponse:
    note = _load_note(notes, note_id)
    authorize_note(ctx, note, "view")
    return NoteResponse(message="Note retrieved successfully", note=_note_out(note, users))


@router.put("/{note_id}", response_model=NoteResponse)
def update_note(
    note_id: UUID,
    payload: NoteUpdate,
    ctx: AuthContext = Depends(get_auth_context),
    notes: NotesStore = Depends(get_notes_store),
) -> NoteResponse:
    note = _load_note(notes, note_id)
    authorize_note(ctx, note, "update")

    updated = notes.update_note(
        note_id=note.id,
        title=payload.title,
        content=payload.content,
        status=payload.status,
    )
    if updated is None:
        # deleted between load and write
        raise NotFound("Note not found")

    logger.info("User %s updated note %s", ctx.user_id, note.id)
    return NoteResponse(message="Note updated successfully", note=_note_out(updated))


@router.delete("/{note_id}", response_model=NoteDeleted)
def delete_note(
    note_id: UUID,
    ctx: AuthContext = Depends(get_auth_context),
    notes: NotesStore = Depends(get_notes_store),
) -> NoteDeleted:
    note = _load_note(notes, note_id)
    authorize_note(ctx, note, "delete")

    if not notes.delete_note(note.id):
        raise NotFound("Note not found")

    logger.info("User %s deleted note %s", ctx.user_id, note.id)
    return NoteDeleted(message="Note deleted successfully", noteId=str(note.id))
