from __future__ import annotations

from dataclasses import dataclass

from .config import Settings
from .session import SessionModel
from .store import SessionKey, SqliteSessionStore


@dataclass
class FacilityMatcherApp:
    settings: Settings
    store: SqliteSessionStore
    session: SessionModel

    @classmethod
    def create(cls, settings: Settings) -> "FacilityMatcherApp":
        store = SqliteSessionStore(settings.store.path)
        key = SessionKey(namespace=settings.store.namespace, user_id=settings.user.id)
        session = SessionModel(store, key, matching=settings.matching)
        return cls(settings=settings, store=store, session=session)

    def close(self) -> None:
        self.store.close()
