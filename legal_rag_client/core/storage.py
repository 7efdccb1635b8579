import json
from pathlib import Path


class TokenStorage:
    """
    Per-session slot mirroring the access token.
    The session keeps the authoritative copy in memory and syncs here on every change.
    """

    def load(self) -> str | None:
        raise NotImplementedError

    def save(self, token: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class MemoryTokenStorage(TokenStorage):
    def __init__(self, token: str | None = None):
        self._token = token

    def load(self) -> str | None:
        return self._token

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStorage(TokenStorage):
    """JSON file holding {"access_token": ...}; removed on clear."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> str | None:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return None
        token = data.get("access_token") if isinstance(data, dict) else None
        return token or None

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"access_token": token}), encoding="utf-8")

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


def storage_from_settings(path: str | None) -> TokenStorage:
    if path:
        return FileTokenStorage(path)
    return MemoryTokenStorage()
