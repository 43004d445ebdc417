"""Whole-document discovery of delimiter-pair instances.

The scanner walks the document with the host's forward search, attempting a
trial inner selection at every delimiter hit. Each successful trial is yanked
into a scratch register the way an editor would, which also moves the scan
cursor to the start of the yanked span; the next search resumes from there.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, List, Optional, Sequence, Set

from remote_ops.buffer import Buffer, Position, RegisterBank, offset_for_position, position_from_offset
from remote_ops.buffer.registers import UNNAMED
from remote_ops.host.search import search_forward
from remote_ops.host.textobjects import TextSpan, select_text_object
from remote_ops.runtime import telemetry

from .models import Instance

if TYPE_CHECKING:  # pragma: no cover
    from .kinds import DelimiterKind

MAX_SCAN_ITERATIONS = 1000
SCRATCH_REGISTER = "a"

TrialSelector = Callable[..., Optional[TextSpan]]


def find_delimiter_instances(
    kind: "DelimiterKind",
    buffer: Buffer,
    *,
    registers: Optional[RegisterBank] = None,
    selector: TrialSelector = select_text_object,
    max_iterations: int = MAX_SCAN_ITERATIONS,
) -> List[Instance]:
    """Return every instance of ``kind`` in ``buffer`` in document order.

    Registers touched by the trial yanks are restored on every exit path.
    """

    if buffer.is_empty():
        return []

    lines = buffer.lines
    bank = registers if registers is not None else RegisterBank()
    instances: List[Instance] = []
    seen: Set[Position] = set()
    cursor: Position = (1, 0)
    accept_at_cursor = True
    last_hit: Optional[Position] = None
    iterations = 0

    with telemetry.span(
        "textobjects::scan",
        logger_name="remote_ops.textobjects",
        component="textobjects",
        metadata={"kind": kind.key, "buffer": buffer.id},
    ) as handle, bank.preserved(SCRATCH_REGISTER, UNNAMED):
        while iterations < max_iterations:
            iterations += 1
            hit = search_forward(
                lines, kind.search_pattern, cursor, accept_at_cursor=accept_at_cursor
            )
            accept_at_cursor = False
            if hit is None:
                break
            if hit == last_hit:
                # Stuck on the same hit: step past it without a trial.
                cursor = (hit[0], hit[1] + 1)
                continue
            last_hit = hit
            cursor = hit

            if kind.opening and not _sits_on(lines, hit, kind.opening):
                continue

            span = selector(lines, hit, kind.trial_key, inner=True)
            if span is None or span.start in seen:
                # Already found: keep scanning forward from the hit.
                continue
            bank.yank_to(SCRATCH_REGISTER, buffer.get_text(span.start, span.end))
            cursor = span.start
            seen.add(span.start)
            instances.append(
                Instance(
                    start=span.start,
                    end=last_character(lines, span),
                    preview=bank.get(SCRATCH_REGISTER).text,
                    anchor=hit,
                )
            )

        handle.add_metadata("iterations", iterations)
        handle.add_metadata("instances", len(instances))
        if iterations >= max_iterations:
            handle.add_metadata("ceiling", True)
    return instances


def last_character(lines: Sequence[str], span: TextSpan) -> Position:
    """Inclusive end of ``span``; an empty span ends where it starts."""

    if span.linewise:
        return (span.end[0], max(0, len(lines[span.end[0] - 1]) - 1))
    if span.is_empty:
        return span.start
    return position_from_offset(lines, offset_for_position(lines, span.end) - 1)


def _sits_on(lines: Sequence[str], position: Position, char: str) -> bool:
    text = lines[position[0] - 1]
    return position[1] < len(text) and text[position[1]] == char


__all__ = ["find_delimiter_instances", "last_character", "MAX_SCAN_ITERATIONS"]
