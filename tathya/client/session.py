"""Client session cache: the signed-in user's tokens and profile in one JSON file."""
from pathlib import Path
from typing import Callable

from tathya.schemas.user import Token

SessionListener = Callable[[Token | None], None]


class SessionStore:
    """File-backed session with explicit invalidation events.

    Every ``save`` and ``clear`` notifies subscribers with the new session
    (``None`` after sign-out), so caches keyed on the user can drop their data.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._current: Token | None = None
        self._listeners: list[SessionListener] = []

    def load(self) -> Token | None:
        if self._current is None and self.path.exists():
            self._current = Token.model_validate_json(self.path.read_text(encoding="utf-8"))
        return self._current

    def save(self, token: Token) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token.model_dump_json(), encoding="utf-8")
        self._current = token
        self._notify()

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
        self._current = None
        self._notify()

    @property
    def access_token(self) -> str | None:
        token = self.load()
        return token.access_token if token else None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._current)
