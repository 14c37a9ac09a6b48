from __future__ import annotations

import contextlib
import fcntl
import os
from collections.abc import Callable, Iterator
from typing import IO, Any

import orjson

PARTITION_KEY = "file_id"


class JsonFileMetadataStore:
    """File records kept in a single JSON document keyed by `file_id`.

    Every access takes an exclusive `fcntl` lock on the document, so several
    workers on the same host can share it.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)

    @contextlib.contextmanager
    def _locked(self) -> Iterator[IO[bytes]]:
        open_mode = "r+b" if os.path.exists(self.path) else "w+b"
        with open(self.path, mode=open_mode) as f:
            fcntl.lockf(f, fcntl.LOCK_EX)
            try:
                yield f
            finally:
                fcntl.lockf(f, fcntl.LOCK_UN)

    @staticmethod
    def _read(f: IO[bytes]) -> dict[str, dict[str, Any]]:
        f.seek(0)
        text = f.read()
        if len(text) > 0:
            return orjson.loads(text)
        return {}

    @staticmethod
    def _write(f: IO[bytes], records: dict[str, dict[str, Any]]) -> None:
        f.seek(0)
        f.truncate(0)
        f.write(orjson.dumps(records, option=orjson.OPT_INDENT_2))
        f.flush()
        os.fsync(f.fileno())

    def _mutate(self, change: Callable[[dict[str, dict[str, Any]]], bool]) -> bool:
        with self._locked() as f:
            records = self._read(f)
            changed = change(records)
            if changed:
                self._write(f, records)
            return changed

    def put(self, record: dict[str, Any]) -> None:
        file_id = record.get(PARTITION_KEY)
        if not file_id:
            raise ValueError(f"record is missing its {PARTITION_KEY}")

        def _put(records: dict[str, dict[str, Any]]) -> bool:
            records[str(file_id)] = dict(record)
            return True

        self._mutate(_put)

    def get(self, file_id: str) -> dict[str, Any] | None:
        with self._locked() as f:
            return self._read(f).get(file_id)

    def scan(self) -> list[dict[str, Any]]:
        with self._locked() as f:
            return list(self._read(f).values())

    def update(self, file_id: str, fields: dict[str, Any]) -> bool:
        def _update(records: dict[str, dict[str, Any]]) -> bool:
            record = records.get(file_id)
            if record is None:
                return False
            record.update(fields)
            return True

        return self._mutate(_update)
