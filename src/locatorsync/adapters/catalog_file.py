"""Catalog repository backed by a local copy of the locations document."""

from __future__ import annotations

import os
import tempfile
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from locatorsync.domain.errors import ExternalServiceError

from .catalog_document import parse_document, render_document

if TYPE_CHECKING:
    from locatorsync.domain.model import CatalogSnapshot

log = getLogger(__name__)


def write_text_atomic(path: Path, content: str) -> None:
    """Replace ``path`` with ``content`` so readers never see a partial file."""

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class FileCatalogStore:
    """Useful for dry runs and for sites that serve the document themselves.

    A missing file reads as an empty catalog.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def read(self) -> CatalogSnapshot:
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            log.info(f"{self.path} does not exist yet, starting with empty data")
            content = None
        except OSError as exc:
            raise ExternalServiceError("catalog-file", f"cannot read {self.path}: {exc}") from exc
        return parse_document(content)

    def write(self, snapshot: CatalogSnapshot) -> None:
        try:
            write_text_atomic(self.path, render_document(snapshot))
        except OSError as exc:
            raise ExternalServiceError("catalog-file", f"cannot write {self.path}: {exc}") from exc
        log.info(f"Wrote catalog to {self.path}")
