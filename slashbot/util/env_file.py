"""Read-only ``.env`` file parser."""

from __future__ import annotations

from pathlib import Path


class EnvFile:
    """Reads a simple ``KEY=VALUE`` file.

    Blank lines and ``#`` comments are skipped, an optional leading
    ``export`` is accepted, and matching surrounding quotes are stripped
    from values.  The file is re-read on every call so edits are picked
    up by :meth:`Settings.reload`.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def read(self, key: str) -> str:
        """Return the value for *key*, or ``""`` if absent."""
        return self.read_all().get(key, "")

    def read_all(self) -> dict[str, str]:
        """Parse the env file into a ``{key: value}`` mapping."""
        if not self.path.is_file():
            return {}
        result: dict[str, str] = {}
        for line in self.path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            if line.startswith("export "):
                line = line[len("export "):].lstrip()
            key, _, value = line.partition("=")
            result[key.strip()] = _unquote(value.strip())
        return result


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value
