"""In-memory session store.

A session groups conversation turns under a session id (sid). The first turn
is always the persona system turn and is never evicted.
Sessions live as long as the process; a multi-instance deployment would need
a shared external store instead.
"""
from __future__ import annotations
import secrets
from dataclasses import dataclass, field
from threading import Lock
from typing import Dict, List, Literal, Optional

Role = Literal["system", "user", "assistant"]

SID_BYTES = 16

@dataclass(frozen=True)
class Turn:
    role: Role
    content: str

    def as_message(self) -> dict:
        return {"role": self.role, "content": self.content}

@dataclass
class Session:
    sid: str
    turns: List[Turn] = field(default_factory=list)
    lock: Lock = field(default_factory=Lock, repr=False, compare=False)


def new_session_id() -> str:
    return secrets.token_hex(SID_BYTES)


def trim(session: Session, max_len: int) -> None:
    """Drop the oldest turns after the seed until at most ``max_len`` remain."""
    overflow = len(session.turns) - max_len
    if overflow > 0:
        del session.turns[1 : 1 + overflow]


class SessionStore:
    def __init__(self, persona_prompt: str, max_history: int = 40) -> None:
        self.persona_prompt = persona_prompt
        self.max_history = max_history
        self._sessions: Dict[str, Session] = {}
        self._lock = Lock()

    def __contains__(self, sid: object) -> bool:
        return sid in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def resolve(self, token: Optional[str]) -> tuple[str, bool]:
        """Return ``(sid, is_new)``; unknown or missing tokens get a fresh id."""
        with self._lock:
            if token and token in self._sessions:
                return token, False
            sid = new_session_id()
            while sid in self._sessions:
                sid = new_session_id()
            self._sessions[sid] = Session(sid=sid, turns=[Turn("system", self.persona_prompt)])
            return sid, True

    def get(self, sid: Optional[str]) -> Session | None:
        if not sid:
            return None
        return self._sessions.get(sid)

    def append(self, sid: str, turn: Turn) -> None:
        sess = self._sessions[sid]
        sess.turns.append(turn)
        trim(sess, self.max_history)

    def messages(self, sid: str) -> list[dict]:
        return [t.as_message() for t in self._sessions[sid].turns]

    def get_all(self, sid: Optional[str]) -> list[Turn]:
        sess = self.get(sid)
        return list(sess.turns) if sess else []

    def clear(self, sid: Optional[str]) -> None:
        sess = self.get(sid)
        if sess is None:
            return
        with sess.lock:
            del sess.turns[1:]
