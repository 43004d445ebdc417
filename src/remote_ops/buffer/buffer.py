"""Buffer façade combining a document with identity and edit primitives."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import ContextManager, List, Optional, Sequence

from remote_ops.errors import HostOperationFailure
from remote_ops.runtime import telemetry

from .document import BufferDocument
from .positions import Position, offset_for_position, position_from_offset
from .validation import ensure_position


@dataclass(slots=True)
class BufferDelta:
    version: int
    removed: str
    cursor: Position
    label: str


class Buffer:
    def __init__(
        self,
        buffer_id: int,
        *,
        name: str = "",
        document: Optional[BufferDocument] = None,
        filetype: str = "",
        listed: bool = True,
        loaded: bool = True,
        readonly: bool = False,
    ) -> None:
        self.id = buffer_id
        self.name = name
        self.document = document or BufferDocument()
        self.filetype = filetype
        self.listed = listed
        self.loaded = loaded
        self.readonly = readonly
        self.valid = True

    @property
    def lines(self) -> Sequence[str]:
        return self.document.snapshot()

    @property
    def line_count(self) -> int:
        return self.document.line_count

    def get_line(self, number: int) -> str:
        return self.document.get_line(number)

    def get_lines(self, start: int, end: int) -> List[str]:
        """Lines in the 0-based, end-exclusive range ``[start:end]``."""

        return list(self.document.snapshot()[start:end])

    def set_lines(self, start: int, end: int, lines: Sequence[str]) -> None:
        self._ensure_writable()
        with Transaction(self, "set_lines"):
            self.document = self.document.update_lines(start, end, lines)

    def get_text(self, start: Position, end: Position) -> str:
        """Text between ``start`` and the exclusive ``end`` position."""

        lines = self.document.snapshot()
        ensure_position(self.document, start)
        ensure_position(self.document, end)
        if end < start:
            start, end = end, start
        text = self.document.text
        return text[offset_for_position(lines, start) : offset_for_position(lines, end)]

    def replace_range(
        self, start: Position, end: Position, text: str, *, label: str
    ) -> BufferDelta:
        self._ensure_writable()
        ensure_position(self.document, start)
        ensure_position(self.document, end)
        with Transaction(self, label):
            lines = self.document.snapshot()
            before = self.document.text
            start_offset = offset_for_position(lines, start)
            end_offset = offset_for_position(lines, end)
            removed = before[start_offset:end_offset]
            self.document = self.document.replace_text(
                before[:start_offset] + text + before[end_offset:]
            )
            cursor = position_from_offset(
                self.document.snapshot(), start_offset + len(text)
            )
        return BufferDelta(
            version=self.document.version, removed=removed, cursor=cursor, label=label
        )

    def delete_range(self, start: Position, end: Position) -> BufferDelta:
        return self.replace_range(start, end, "", label="delete_range")

    def insert_text(self, position: Position, text: str) -> BufferDelta:
        return self.replace_range(position, position, text, label="insert_text")

    def is_empty(self) -> bool:
        return self.document.is_blank()

    def _ensure_writable(self) -> None:
        if self.readonly:
            raise HostOperationFailure(f"Buffer {self.id} is read-only")


class Transaction(AbstractContextManager["Transaction"]):
    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.id},
        )
        self._span_cm.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False
