"""Atomic persistence of rendered documents.

Each document is written to a temporary file in its target directory and
moved into place, so a failed write never leaves a partial artifact.
"""

from __future__ import annotations

import pathlib
import shutil
import tempfile
from typing import Iterable

import structlog

from nodegql.renderers.base import RenderedDocument

logger = structlog.get_logger(__name__)


class OutputWriter:
    """Writes :class:`RenderedDocument` objects under a root directory.

    Args:
        root: Directory documents are written to; created on demand.
    """

    def __init__(self, root: pathlib.Path) -> None:
        self.root = root

    def write(self, document: RenderedDocument) -> pathlib.Path:
        """Atomically write *document* and return its final path.

        Raises:
            OSError: If the directory cannot be created or the file cannot
                be written; no partial file is left behind.
        """
        target = self.root / document.file_name
        target.parent.mkdir(parents=True, exist_ok=True)

        temp_fd, temp_path = tempfile.mkstemp(
            suffix=".tmp",
            prefix=f".{target.name}.",
            dir=target.parent,
        )
        try:
            with open(temp_fd, "w", encoding="utf-8", newline="\n") as temp_f:
                temp_f.write(document.content)
            shutil.move(temp_path, target)
        except BaseException:
            pathlib.Path(temp_path).unlink(missing_ok=True)
            raise

        logger.debug("document_written", path=str(target), size=len(document.content))
        return target

    def write_all(self, documents: Iterable[RenderedDocument]) -> list[pathlib.Path]:
        return [self.write(document) for document in documents]

    def remove_stale(self, keep: Iterable[pathlib.Path], suffix: str = "") -> list[pathlib.Path]:
        """Delete regular files directly under the root that are not in *keep*.

        Args:
            keep: Paths written by the current run.
            suffix: Only files with this suffix are considered, when given.

        Returns:
            The deleted paths.
        """
        if not self.root.is_dir():
            return []
        retained = {p.resolve() for p in keep}
        removed: list[pathlib.Path] = []
        for path in sorted(self.root.iterdir()):
            if not path.is_file() or (suffix and path.suffix != suffix):
                continue
            if path.resolve() in retained:
                continue
            path.unlink()
            removed.append(path)
            logger.info("stale_file_removed", path=str(path))
        return removed
