# session_store.py
# Description: Saves, loads and lists chat sessions as one TOML record per session
#
# Imports
import re
import sys
if sys.version_info < (3, 11):
    import tomli as tomllib
else:
    import tomllib
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Literal, NamedTuple, Optional, Union
#
# Third-Party Imports
import toml
from loguru import logger
from pydantic import BaseModel, ValidationError
#
# Local Imports
from ai_chat.Chat.Chat_Deps import (
    SessionCorruptError,
    SessionNotFoundError,
    SessionSaveError,
    SessionStoreError,
)
from ai_chat.Chat.chat_models import ChatMessage, ChatSession, SessionSummary
from ai_chat.LLM_Calls.provider_registry import ProviderRegistry
from ai_chat.Utils.atomic_file_ops import atomic_write_text
#
#######################################################################################################################
#
# On-disk record

RECORD_SUFFIX = ".toml"
_SAFE_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class RecordMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str
    timestamp: Optional[datetime] = None


class SessionRecord(BaseModel):
    """Shape of a saved session file. Every field except ``created_at`` is required."""
    id: str
    title: str
    provider: str
    model: str
    created_at: Optional[datetime] = None
    messages: List[RecordMessage]

    @classmethod
    def from_session(cls, session: ChatSession) -> "SessionRecord":
        return cls(
            id=session.id,
            title=session.title,
            provider=session.provider,
            model=session.model,
            created_at=session.created_at,
            messages=[
                RecordMessage(role=m.role, content=m.content, timestamp=m.timestamp)
                for m in session.messages
            ],
        )

    def to_session(self) -> ChatSession:
        messages = []
        for m in self.messages:
            if m.timestamp is not None:
                messages.append(ChatMessage(role=m.role, content=m.content, timestamp=m.timestamp))
            else:
                messages.append(ChatMessage(role=m.role, content=m.content))
        data: Dict[str, Any] = dict(
            id=self.id,
            title=self.title,
            provider=self.provider,
            model=self.model,
            messages=messages,
        )
        if self.created_at is not None:
            data["created_at"] = self.created_at
        return ChatSession(**data)

    @property
    def timestamp(self) -> int:
        """Creation time in epoch milliseconds, used to order the history list."""
        if self.id.isdigit():
            return int(self.id)
        if self.created_at is not None:
            return int(self.created_at.timestamp() * 1000)
        return 0


def _dump_toml_string(value: str) -> str:
    """Encode ``value`` as a TOML basic string."""
    escaped = []
    for ch in value:
        if ch == '"':
            escaped.append('\\"')
        elif ch == '\\':
            escaped.append('\\\\')
        elif ch == '\n':
            escaped.append('\\n')
        elif ch == '\t':
            escaped.append('\\t')
        elif ch == '\r':
            escaped.append('\\r')
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            escaped.append(f"\\u{ord(ch):04X}")
        else:
            escaped.append(ch)
    return '"' + ''.join(escaped) + '"'


class SessionTomlEncoder(toml.TomlEncoder):
    """TOML encoder whose string escaping round-trips arbitrary message text."""

    def __init__(self, _dict=dict, preserve=False):
        super().__init__(_dict, preserve)
        self.dump_funcs[str] = _dump_toml_string


class LoadedSession(NamedTuple):
    """A session read from disk plus its provider/model checked against the catalog.

    ``provider``/``model`` are None when the stored value is not usable with the
    current catalog; the caller should then keep its current selection.
    """
    session: ChatSession
    provider: Optional[str]
    model: Optional[str]


#######################################################################################################################
#
# Classes:

class SessionStore:
    """One-record-per-session persistence in a history directory."""

    def __init__(self, history_dir: Union[str, Path], registry: ProviderRegistry):
        self.history_dir = Path(history_dir).expanduser()
        self.history_dir.mkdir(parents=True, exist_ok=True)
        self.registry = registry
        logger.debug(f"SessionStore using history directory {self.history_dir}")

    def record_path(self, session_id: str) -> Path:
        """Path of the record for ``session_id``. Raises ValueError for ids that are not safe file stems."""
        if not _SAFE_ID_RE.match(session_id or ""):
            raise ValueError(f"Invalid session id: {session_id!r}")
        return self.history_dir / f"{session_id}{RECORD_SUFFIX}"

    def save(self, session: ChatSession) -> bool:
        """
        Write ``session`` to its record, overwriting any previous version.

        Sessions without a single user message are not written. The title is
        derived from the first user message if it is still the default.

        Returns:
            True if a record was written, False if the save was skipped.

        Raises:
            SessionSaveError: If the record could not be serialized or written.
        """
        if session.user_turn_count() < 1:
            logger.debug(f"Skipping save of session {session.id}: no messages yet")
            return False

        if session.ensure_title():
            logger.debug(f"Session {session.id} titled '{session.title}'")

        try:
            path = self.record_path(session.id)
            record = SessionRecord.from_session(session)
            content = toml.dumps(record.model_dump(mode="json", exclude_none=True), encoder=SessionTomlEncoder())
            atomic_write_text(path, content)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save session {session.id}: {e}")
            raise SessionSaveError(str(e), session.id) from e

        logger.info(f"Saved session {session.id} ({len(session.messages)} messages) to {path}")
        return True

    def load(self, session_id: str) -> LoadedSession:
        """
        Read the record for ``session_id``.

        Raises:
            SessionNotFoundError: No record exists for the id.
            SessionCorruptError: The record is unparseable or misses required fields.
        """
        try:
            path = self.record_path(session_id)
        except ValueError as e:
            raise SessionNotFoundError(str(e), session_id) from e
        if not path.is_file():
            raise SessionNotFoundError(f"no saved chat with id {session_id}", session_id)

        session = self._read_record(path).to_session()
        provider, model = self.registry.validate_selection(session.provider, session.model)
        if provider is None:
            logger.warning(f"Session {session_id} uses unknown provider '{session.provider}'; keeping current provider")
        elif model is None:
            logger.warning(f"Session {session_id} uses unknown model '{session.model}' for {provider}; keeping current model")

        logger.info(f"Loaded session {session_id} ({len(session.messages)} messages)")
        return LoadedSession(session, provider, model)

    def list_sessions(self) -> List[SessionSummary]:
        """
        Summaries of every readable record, most recent first.

        Never raises: unreadable or invalid records, and records whose stored id
        does not match their file name, are skipped.
        """
        try:
            paths = sorted(self.history_dir.glob(f"*{RECORD_SUFFIX}"))
        except OSError as e:
            logger.warning(f"Could not list history directory {self.history_dir}: {e}")
            return []

        summaries = []
        for path in paths:
            try:
                record = self._read_record(path)
            except SessionStoreError as e:
                logger.debug(f"Skipping unreadable session record {path.name}: {e}")
                continue
            if record.id != path.stem:
                logger.debug(f"Skipping session record {path.name}: stored id {record.id!r} does not match the file name")
                continue
            summaries.append(SessionSummary(
                id=record.id,
                title=record.title or "Untitled Chat",
                provider=record.provider,
                timestamp=record.timestamp,
            ))

        summaries.sort(key=lambda s: (s.timestamp, s.id), reverse=True)
        return summaries

    def _read_record(self, path: Path) -> SessionRecord:
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise SessionNotFoundError(f"no saved chat at {path.name}", path.stem) from e
        except (OSError, UnicodeDecodeError) as e:
            raise SessionCorruptError(f"could not read {path.name}: {e}", path.stem) from e

        try:
            data = tomllib.loads(raw)
            return SessionRecord.model_validate(data)
        except tomllib.TOMLDecodeError as e:
            raise SessionCorruptError(f"{path.name} is not valid TOML: {e}", path.stem) from e
        except ValidationError as e:
            raise SessionCorruptError(
                f"{path.name} is missing or has invalid fields ({e.error_count()} errors)", path.stem
            ) from e

#
# End of session_store.py
#######################################################################################################################
