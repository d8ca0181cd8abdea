"""Storage strategies for split output files.

The pipeline never decides where files go. It asks a
:class:`DestinationAllocator` for a writable handle per output and for the
location to report once the run has finished. Two filesystem strategies are
provided, mirroring the two ways the files can be laid out on a device:

* :class:`DirectoryAllocator` writes straight into ``<base>/<folder>`` and
  reports the absolute directory.
* :class:`ScopedStorageAllocator` writes into a shared collection under a
  relative root (``Documents/PDF Splitter`` by default), publishing each file
  with an atomic rename, and reports the logical relative path.

:class:`MemoryAllocator` keeps outputs in memory for library callers.
"""

from __future__ import annotations

import io
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO, Dict, Optional, Protocol, Set

from .exceptions import DestinationAllocationError

LOGGER = logging.getLogger(__name__)

DEFAULT_RELATIVE_ROOT = "Documents/PDF Splitter"
STORAGE_STRATEGIES = ("legacy", "scoped")


class OutputHandle(Protocol):
    """Writable destination for exactly one output file."""

    location: str

    @property
    def stream(self) -> BinaryIO:
        ...

    def commit(self) -> None:
        """Close the stream and make the output visible."""

    def abort(self) -> None:
        """Close the stream and remove anything partially written."""


class DestinationAllocator(Protocol):
    """Creates output handles and reports where outputs were placed."""

    def open(self, folder_name: str, file_name: str) -> OutputHandle:
        ...

    def location(self, folder_name: str) -> str:
        ...

    def discard(self, location: str) -> None:
        ...


def ensure_directory_writable(directory: Path, required_mb: int = 0) -> Path:
    """Create ``directory`` if needed and check that it accepts writes."""

    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DestinationAllocationError(
            f"Permission denied while creating directory: {directory}. Error: {exc}"
        ) from exc

    probe = directory / ".page_splitter_probe"
    try:
        with probe.open("wb") as handle:
            handle.write(b"0")
        probe.unlink()
    except OSError as exc:
        raise DestinationAllocationError(
            f"Cannot write to directory: {directory}. Error: {exc}"
        ) from exc

    if required_mb:
        free = shutil.disk_usage(str(directory)).free
        if free / (1024 * 1024) < required_mb:
            raise DestinationAllocationError(
                "Insufficient disk space in {directory}. Available {available:.1f} MB, "
                "required {required} MB.".format(
                    directory=directory,
                    available=free / (1024 * 1024),
                    required=required_mb,
                )
            )

    return directory


def _safe_component(name: str) -> str:
    cleaned = name.replace("/", "_").replace("\\", "_").strip()
    if cleaned in ("", ".", ".."):
        raise DestinationAllocationError(f"Invalid output name: {name!r}")
    return cleaned


class FileOutputHandle:
    """Handle writing to ``temp_path`` and publishing to ``final_path`` on commit."""

    def __init__(self, final_path: Path, temp_path: Optional[Path] = None) -> None:
        self.final_path = final_path
        self.temp_path = temp_path or final_path
        self.location = str(final_path)
        try:
            self._stream: BinaryIO = self.temp_path.open("wb")
        except OSError as exc:
            raise DestinationAllocationError(
                f"Cannot create output file: {final_path}. Error: {exc}"
            ) from exc

    @property
    def stream(self) -> BinaryIO:
        return self._stream

    def commit(self) -> None:
        self._stream.close()
        if self.temp_path != self.final_path:
            try:
                self.temp_path.replace(self.final_path)
            except OSError as exc:
                self.temp_path.unlink(missing_ok=True)
                raise DestinationAllocationError(
                    f"Cannot publish output file: {self.final_path}. Error: {exc}"
                ) from exc

    def abort(self) -> None:
        self._stream.close()
        self.temp_path.unlink(missing_ok=True)


class DirectoryAllocator:
    """Write outputs directly into ``<base_dir>/<folder_name>``."""

    def __init__(self, base_dir: str | Path, *, required_mb: int = 0) -> None:
        self.base_dir = Path(base_dir).expanduser()
        self.required_mb = required_mb
        self._prepared: Set[Path] = set()

    def _folder(self, folder_name: str) -> Path:
        folder = self.base_dir / _safe_component(folder_name)
        if folder not in self._prepared:
            ensure_directory_writable(folder, required_mb=self.required_mb)
            self._prepared.add(folder)
        return folder

    def open(self, folder_name: str, file_name: str) -> FileOutputHandle:
        path = self._folder(folder_name) / _safe_component(file_name)
        LOGGER.debug("Allocating %s", path)
        return FileOutputHandle(path)

    def location(self, folder_name: str) -> str:
        return str((self.base_dir / _safe_component(folder_name)).resolve())

    def discard(self, location: str) -> None:
        Path(location).unlink(missing_ok=True)


class ScopedStorageAllocator:
    """Publish outputs into a shared collection under a relative root.

    Each file is written to a pending temporary file in the target folder and
    renamed into place on commit, so readers of the collection never see a
    half-written PDF.
    """

    def __init__(
        self,
        storage_root: str | Path,
        relative_root: str = DEFAULT_RELATIVE_ROOT,
        *,
        required_mb: int = 0,
    ) -> None:
        self.storage_root = Path(storage_root).expanduser()
        self.relative_root = relative_root.strip("/")
        self.required_mb = required_mb
        self._prepared: Set[Path] = set()

    def _relative(self, folder_name: str) -> str:
        return f"{self.relative_root}/{_safe_component(folder_name)}"

    def _folder(self, folder_name: str) -> Path:
        folder = self.storage_root / self._relative(folder_name)
        if folder not in self._prepared:
            ensure_directory_writable(folder, required_mb=self.required_mb)
            self._prepared.add(folder)
        return folder

    def open(self, folder_name: str, file_name: str) -> FileOutputHandle:
        folder = self._folder(folder_name)
        final_path = folder / _safe_component(file_name)
        try:
            fd, temp_name = tempfile.mkstemp(dir=folder, prefix=".pending-", suffix=".pdf")
        except OSError as exc:
            raise DestinationAllocationError(
                f"Cannot create pending entry for {final_path}. Error: {exc}"
            ) from exc
        os.close(fd)
        LOGGER.debug("Allocating pending entry %s for %s", temp_name, final_path)
        return FileOutputHandle(final_path, Path(temp_name))

    def location(self, folder_name: str) -> str:
        return self._relative(folder_name)

    def discard(self, location: str) -> None:
        Path(location).unlink(missing_ok=True)


class _MemoryHandle:
    def __init__(self, owner: "MemoryAllocator", key: str) -> None:
        self._owner = owner
        self._buffer = io.BytesIO()
        self.location = key

    @property
    def stream(self) -> BinaryIO:
        return self._buffer

    def commit(self) -> None:
        self._owner.files[self.location] = self._buffer.getvalue()
        self._buffer.close()

    def abort(self) -> None:
        self._buffer.close()


class MemoryAllocator:
    """Keep outputs as bytes keyed by ``<folder>/<file>``."""

    def __init__(self) -> None:
        self.files: Dict[str, bytes] = {}

    def open(self, folder_name: str, file_name: str) -> _MemoryHandle:
        key = f"{_safe_component(folder_name)}/{_safe_component(file_name)}"
        return _MemoryHandle(self, key)

    def location(self, folder_name: str) -> str:
        return _safe_component(folder_name)

    def discard(self, location: str) -> None:
        self.files.pop(location, None)


def create_allocator(
    strategy: str,
    root: str | Path,
    *,
    required_mb: int = 0,
) -> DestinationAllocator:
    """Return the allocator for ``strategy`` (``"legacy"`` or ``"scoped"``)."""

    if strategy == "legacy":
        return DirectoryAllocator(Path(root) / "PDF Splitter", required_mb=required_mb)
    if strategy == "scoped":
        return ScopedStorageAllocator(root, required_mb=required_mb)
    raise ValueError(
        f"Unknown storage strategy: {strategy!r}. Expected one of {', '.join(STORAGE_STRATEGIES)}."
    )


def folder_name_for(source: str | Path) -> str:
    """Derive the output folder name from the source file's base name."""

    name = Path(source).name
    stem = name.rsplit(".", 1)[0] if "." in name else name
    return stem or "unknown"


__all__ = [
    "OutputHandle",
    "DestinationAllocator",
    "DirectoryAllocator",
    "ScopedStorageAllocator",
    "MemoryAllocator",
    "FileOutputHandle",
    "create_allocator",
    "ensure_directory_writable",
    "folder_name_for",
    "DEFAULT_RELATIVE_ROOT",
    "STORAGE_STRATEGIES",
]
