"""Session cookie extraction from a Firefox profile."""

from __future__ import annotations

import logging
import shutil
import sqlite3
import tempfile
from contextlib import closing
from pathlib import Path

from prnotify.errors import CookieExtractionError

logger = logging.getLogger(__name__)


def extract_cookies(cookies_file_path: str | Path, hostname: str) -> str:
    """Return ``name=value;`` pairs for ``hostname`` joined by spaces.

    Firefox keeps ``cookies.sqlite`` locked while running, so the database is
    copied to a temporary directory before it is opened.
    """
    source = Path(cookies_file_path)
    try:
        with tempfile.TemporaryDirectory(prefix="prnotify-cookies-") as tmp_dir:
            copy = Path(tmp_dir) / "cookies.sqlite"
            shutil.copyfile(source, copy)
            wal = source.with_name(f"{source.name}-wal")
            if wal.exists():
                shutil.copyfile(wal, copy.with_name(f"{copy.name}-wal"))
            with closing(sqlite3.connect(copy)) as conn:
                rows = conn.execute(
                    "SELECT name, value FROM moz_cookies WHERE host = ? OR host = ?",
                    (hostname, f".{hostname}"),
                ).fetchall()
    except (OSError, sqlite3.Error) as exc:
        raise CookieExtractionError(f"Could not read cookies for {hostname} from {source}: {exc}") from exc

    logger.debug("Extracted %s cookies for %s", len(rows), hostname)
    return " ".join(f"{name}={value};" for name, value in rows)
