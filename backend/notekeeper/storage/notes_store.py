import uuid
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

from notekeeper.models.notes import NoteStatus
from notekeeper.storage.files import StoreError, atomic_write_json, read_json, utc_now_iso


def _notes_dir(base_dir: Path) -> Path:
    return base_dir / "notes"


def _note_path(base_dir: Path, note_id: uuid.UUID) -> Path:
    # note_id is always a parsed UUID, so it is safe as a file name
    return _notes_dir(base_dir) / f"{note_id}.json"


@dataclass(frozen=True)
class Note:
    id: uuid.UUID
    user_id: str
    title: str
    content: str
    status: NoteStatus
    created_at: str
    updated_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "user_id": self.user_id,
            "title": self.title,
            "content": self.content,
            "status": self.status.value,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Note":
        return cls(
            id=uuid.UUID(raw["id"]),
            user_id=raw["user_id"],
            title=raw["title"],
            content=raw["content"],
            status=NoteStatus(raw.get("status", NoteStatus.PENDING.value)),
            created_at=raw["created_at"],
            updated_at=raw["updated_at"],
        )


def _parse(raw: dict[str, Any], path: Path) -> Note:
    try:
        return Note.from_dict(raw)
    except (KeyError, TypeError, ValueError) as exc:
        raise StoreError(f"Malformed note {path.name}") from exc


class NotesStore:
    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def create_note(
        self,
        user_id: str,
        title: str,
        content: str,
        status: NoteStatus = NoteStatus.PENDING,
    ) -> Note:
        now = utc_now_iso()
        note = Note(
            id=uuid.uuid4(),
            user_id=user_id,
            title=title,
            content=content,
            status=status,
            created_at=now,
            updated_at=now,
        )
        atomic_write_json(_note_path(self.base_dir, note.id), note.to_dict())
        return note

    def list_notes(self, user_id: Optional[str] = None) -> list[Note]:
        """Notes newest first; all notes when user_id is None."""
        notes_dir = _notes_dir(self.base_dir)
        if not notes_dir.exists():
            return []
        out: list[Note] = []
        for p in notes_dir.glob("*.json"):
            raw = read_json(p)
            if raw is None:
                # removed between glob and read
                continue
            note = _parse(raw, p)
            if user_id is None or note.user_id == user_id:
                out.append(note)
        out.sort(key=lambda n: (n.created_at, str(n.id)), reverse=True)
        return out

    def get_note(self, note_id: uuid.UUID) -> Note | None:
        path = _note_path(self.base_dir, note_id)
        raw = read_json(path)
        if raw is None:
            return None
        return _parse(raw, path)

    def update_note(
        self,
        note_id: uuid.UUID,
        title: Optional[str] = None,
        content: Optional[str] = None,
        status: Optional[NoteStatus] = None,
    ) -> Note | None:
        existing = self.get_note(note_id)
        if existing is None:
            return None

        changes: dict[str, Any] = {"updated_at": utc_now_iso()}
        if title:
            changes["title"] = title
        if content:
            changes["content"] = content
        if status:
            changes["status"] = status

        # owner and creation time are never rewritten
        updated = replace(existing, **changes)
        atomic_write_json(_note_path(self.base_dir, note_id), updated.to_dict())
        return updated

    def delete_note(self, note_id: uuid.UUID) -> bool:
        path = _note_path(self.base_dir, note_id)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StoreError(f"Cannot delete {path.name}") from exc
        return True
