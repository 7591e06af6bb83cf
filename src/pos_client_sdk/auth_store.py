from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from platformdirs import user_data_dir
from pydantic import ValidationError

from .models import SessionData


class TokenProvider(Protocol):
    def get_token(self) -> str | None: ...


@dataclass(frozen=True)
class StaticTokenProvider:
    token: str | None = None

    def get_token(self) -> str | None:
        return self.token or None


@dataclass
class AuthStore:
    """Session persisted under the user data dir; survives process restarts."""

    app_name: str = "pos-client"
    filename: str = "session.json"
    base_dir: Path | None = None

    def _path(self) -> Path:
        base = self.base_dir or Path(user_data_dir(self.app_name, "POS"))
        base.mkdir(parents=True, exist_ok=True)
        return base / self.filename

    def get_token(self) -> str | None:
        session = self.load()
        if session is None:
            return None
        return session.access_token or None

    def save(self, session: SessionData) -> None:
        path = self._path()
        data = session.model_dump()
        path.write_text(json.dumps(data, indent=2))
        try:
            path.chmod(0o600)
        except OSError:
            pass

    def load(self) -> SessionData | None:
        path = self._path()
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError:
            self.clear()
            return None
        try:
            return SessionData(**data)
        except (TypeError, ValidationError):
            self.clear()
            return None

    def clear(self) -> None:
        path = self._path()
        if path.exists():
            path.unlink()
