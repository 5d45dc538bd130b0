"""Armazenamento local: slots nomeados guardando texto (JSON)."""
from typing import Dict, Optional

from jewelryoclock.core.ports import ILocalStorage


class SessionStorage(ILocalStorage):
    """Slots guardados na sessão do Django do cliente."""

    def __init__(self, session):
        self.session = session

    def get_item(self, key: str) -> Optional[str]:
        value = self.session.get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str):
        self.session[key] = value
        self.session.modified = True

    def remove_item(self, key: str):
        if key in self.session:
            del self.session[key]
            self.session.modified = True


class MemoryStorage(ILocalStorage):

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_item(self, key: str, value: str):
        self.data[key] = value

    def remove_item(self, key: str):
        self.data.pop(key, None)
