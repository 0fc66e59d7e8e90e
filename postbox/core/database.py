"""JSON document store with reader-writer locking"""

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Union
import logging
import os
import tempfile
import threading

from pydantic import ValidationError as PydanticValidationError

from postbox.core.exceptions import DocumentDecodeError, StorageIOError
from postbox.models.document import Document

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """Many readers or one writer. Waiting writers block new readers."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writers_waiting = 0
        self._writer: Optional[int] = None

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer is not None or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer is not None or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = threading.get_ident()
        try:
            yield
        finally:
            with self._cond:
                self._writer = None
                self._cond.notify_all()

    def is_write_held(self) -> bool:
        """True when the calling thread holds the exclusive lock"""
        return self._writer == threading.get_ident()


class RecordStore:
    """
    Owns the single JSON document on disk.

    Every public operation is one load-transform-persist cycle under the
    lock; nothing is cached between calls. Writes go to a temporary file in
    the same directory and are moved over the target with ``os.replace``,
    so readers only ever see a complete document.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = ReadWriteLock()
        # Highest id handed out per collection during this process.
        self._high_water: Dict[str, int] = {}

    def initialize(self) -> None:
        """
        Create an empty document if none exists at ``path``.

        Existing files are left untouched.

        Raises:
            StorageIOError: If the path cannot be created or written
        """
        with self._lock.write_locked():
            if self.path.exists():
                logger.info(f"Using existing document at {self.path}")
                return
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.error(f"Cannot create directory for {self.path}: {e}")
                raise StorageIOError(f"Cannot create document directory: {e}") from e
            self._write(Document())
            logger.info(f"Created new document at {self.path}")

    def read(self) -> Document:
        """
        Load the current document under the shared lock.

        Raises:
            StorageIOError: If the file cannot be read
            DocumentDecodeError: If the file content is not a valid document
        """
        with self._lock.read_locked():
            return self._load()

    def mutate(self, fn: Callable[[Document], Document]) -> Document:
        """
        Apply ``fn`` to the current document and persist its result.

        Nothing is written if loading, ``fn`` or encoding raises.

        Returns:
            The document that was persisted
        """
        with self._lock.write_locked():
            updated = fn(self._load())
            self._write(updated)
            return updated

    @contextmanager
    def edit(self) -> Iterator[Document]:
        """
        Context-manager form of ``mutate``.

        Usage::

            with store.edit() as document:
                document.posts[post.id] = post

        The document is persisted when the block exits normally and
        discarded when it raises.
        """
        with self._lock.write_locked():
            document = self._load()
            yield document
            self._write(document)

    def next_id(self, collection: str, mapping: Mapping[int, Any]) -> int:
        """
        Allocate the next id for ``collection``.

        Ids are one above the larger of the highest stored id and the highest
        id this store has already handed out, so deleting the newest entity
        never frees its id. Must be called inside ``edit``/``mutate``.
        """
        if not self._lock.is_write_held():
            raise RuntimeError("next_id() requires the store write lock")
        highest = max(max(mapping, default=0), self._high_water.get(collection, 0))
        new_id = highest + 1
        self._high_water[collection] = new_id
        return new_id

    def reset(self) -> Document:
        """Replace the document with an empty one"""
        logger.warning(f"Resetting document at {self.path}")
        return self.mutate(lambda _: Document())

    def _load(self) -> Document:
        try:
            raw = self.path.read_bytes()
        except OSError as e:
            logger.error(f"Failed to read {self.path}: {e}")
            raise StorageIOError(f"Failed to read document: {e}") from e

        try:
            return Document.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.error(f"Invalid document in {self.path}: {e}")
            raise DocumentDecodeError(f"Invalid document at {self.path}") from e

    def _write(self, document: Document) -> None:
        payload = document.model_dump_json(indent=2)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, self.path)
        except OSError as e:
            logger.error(f"Failed to write {self.path}: {e}")
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageIOError(f"Failed to write document: {e}") from e
