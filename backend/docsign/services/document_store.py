"""
Document Store for uploaded PDFs.

Layout on disk, one folder per document and one file per version:

    <storage_root>/<title>/[<YYYY-MM-DD>] - <title>.pdf
"""

import logging
import re
import shutil
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import List, Optional, Tuple

from docsign.config import settings
from docsign.utils.exceptions import FileOperationError, InputValidationError, NotFoundError

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"
_VERSION_FILE_RE = re.compile(r"^\[(\d{4}-\d{2}-\d{2})\] - (.+)\.pdf$")


@dataclass
class DocumentVersion:
    title: str
    version_date: date
    path: Path
    size: int


def _validate_title(title: str, field: str = "title") -> str:
    title = (title or "").strip()
    if not title:
        raise InputValidationError("Document title is required", field=field)
    if "/" in title or "\\" in title or title in {".", ".."} or "\x00" in title:
        raise InputValidationError(f"Invalid document title: {title}", field=field)
    return title


def _version_file_name(title: str, version_date: date) -> str:
    return f"[{version_date.isoformat()}] - {title}.pdf"


class DocumentStore:
    """Filesystem-backed storage of document versions."""

    def __init__(self, root: Optional[str] = None):
        self.root = Path(root or settings.storage_root)

    def _folder(self, title: str) -> Path:
        return self.root / title

    def save(self, title: str, version_date: date, data: bytes) -> Path:
        title = _validate_title(title)
        if not data or not data.startswith(PDF_MAGIC):
            raise InputValidationError("Uploaded file is not a PDF", field="file")

        folder = self._folder(title)
        path = folder / _version_file_name(title, version_date)
        try:
            folder.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise FileOperationError("write", str(path), str(e)) from e

        logger.info(f"Stored document version {path.name} ({len(data)} bytes)")
        return path

    def list_titles(self) -> List[str]:
        if not self.root.exists():
            return []
        return sorted(p.name for p in self.root.iterdir() if p.is_dir())

    def list_versions(self, title: str) -> List[DocumentVersion]:
        title = _validate_title(title)
        folder = self._folder(title)
        if not folder.is_dir():
            return []

        versions = []
        for path in folder.iterdir():
            match = _VERSION_FILE_RE.match(path.name)
            if not match or not path.is_file():
                continue
            try:
                version_date = date.fromisoformat(match.group(1))
            except ValueError:
                logger.warning(f"Skipping version file with invalid date: {path}")
                continue
            versions.append(DocumentVersion(title=title, version_date=version_date, path=path, size=path.stat().st_size))

        return sorted(versions, key=lambda v: v.version_date)

    def get_version(self, title: str, version_date: Optional[date] = None) -> DocumentVersion:
        """Newest version, or the one stored for version_date."""
        versions = self.list_versions(title)
        if not versions:
            raise NotFoundError("Document", title)
        if version_date is None:
            return versions[-1]
        for version in versions:
            if version.version_date == version_date:
                return version
        raise NotFoundError("Document version", f"{title} {version_date.isoformat()}")

    def load(self, title: str, version_date: Optional[date] = None) -> Tuple[bytes, str]:
        """(content, file name) of a stored version."""
        version = self.get_version(title, version_date)
        try:
            return version.path.read_bytes(), version.path.name
        except OSError as e:
            raise FileOperationError("read", str(version.path), str(e)) from e

    def rename(self, title: str, new_title: str) -> None:
        title = _validate_title(title)
        new_title = _validate_title(new_title, field="new_title")
        old_folder, new_folder = self._folder(title), self._folder(new_title)
        if not old_folder.is_dir():
            raise NotFoundError("Document", title)
        if new_folder.exists():
            raise InputValidationError(f"A document named {new_title} already exists", field="new_title")

        try:
            for version in self.list_versions(title):
                version.path.rename(old_folder / _version_file_name(new_title, version.version_date))
            old_folder.rename(new_folder)
        except OSError as e:
            raise FileOperationError("rename", str(old_folder), str(e)) from e

        logger.info(f"Renamed document {title!r} -> {new_title!r}")

    def delete(self, title: str) -> None:
        title = _validate_title(title)
        folder = self._folder(title)
        if not folder.is_dir():
            raise NotFoundError("Document", title)
        try:
            shutil.rmtree(folder)
        except OSError as e:
            raise FileOperationError("delete", str(folder), str(e)) from e

        logger.info(f"Deleted document {title!r}")


# Singleton instance
document_store = DocumentStore()
