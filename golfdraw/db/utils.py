import re
from pathlib import Path

_RELATIVE_SQLITE = re.compile(r"^(sqlite(?:\+\w+)?):///\./(.*)$")


def resolve_sqlite_url(url: str, project_root: Path) -> str:
    """Anchor a relative SQLite URL (``sqlite:///./dev.db``) at ``project_root``.

    Driver-qualified forms such as ``sqlite+pysqlite:///./dev.db`` are handled
    too. In-memory and non-SQLite URLs are returned unchanged.
    """
    match = _RELATIVE_SQLITE.match(url)
    if match is None:
        return url
    scheme, rel = match.groups()
    return f"{scheme}:///{(project_root / rel).resolve()}"
