"""
Notebook engine: the ordered cell sequence and its run protocol.

Cell transitions:
- editable: input may change via update_input
- pending:  run dispatched, waiting for the evaluator
- resolved: output set, terminal

The sequence is held as a tuple and replaced wholesale on every change, so a
response only ever rewrites its own cell no matter how runs interleave. The
trailing cell is the next one to fill in; running it appends a fresh one once
its result is in.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional, Sequence, Union

from replbook.errors import HttpError
from replbook.models.cell import Cell, CellStatus
from replbook.repl import ReplAPI
from replbook.transport.dispatch import BoundedDispatcher, UnboundedDispatcher

logger = logging.getLogger("replbook.notebook")

Dispatcher = Union[UnboundedDispatcher, BoundedDispatcher]
Listener = Callable[[Sequence[Cell]], None]

DEFAULT_RESIZE_DELAY_S = 0.15


def server_error_text(status_code: int, body: str) -> str:
    return f"Server error: {status_code} {body}"


class NotebookEngine:
    def __init__(
        self,
        repl: ReplAPI,
        repl_id: Optional[int] = None,
        *,
        dispatcher: Optional[Dispatcher] = None,
        on_resize: Optional[Callable[[int], None]] = None,
        resize_delay_s: float = DEFAULT_RESIZE_DELAY_S,
        cells: Optional[Sequence[Cell]] = None,
    ):
        self._repl = repl
        self._repl_id = repl_id
        self._dispatcher: Dispatcher = dispatcher or UnboundedDispatcher()
        self._on_resize = on_resize
        self._resize_delay_s = resize_delay_s
        self._resize_timers: dict[int, asyncio.TimerHandle] = {}
        self._listeners: list[Listener] = []
        self._tasks: set[asyncio.Task[Optional[Cell]]] = set()
        self._closed = False
        self._next_id = 0
        self._cells: tuple[Cell, ...] = self._seed(cells or ())

    @classmethod
    def from_transcript(
        cls, repl: ReplAPI, repl_id: Optional[int], records: Sequence[dict[str, Any]], **kwargs: Any,
    ) -> "NotebookEngine":
        """Rebuild a notebook from ``transcript()`` output."""
        cells = [
            Cell(
                id=i,
                input=r.get("input", ""),
                output=r.get("output") or "",
                status=CellStatus(r.get("status", CellStatus.EDITABLE.value)),
            )
            for i, r in enumerate(records)
        ]
        return cls(repl, repl_id, cells=cells, **kwargs)

    def _seed(self, cells: Sequence[Cell]) -> tuple[Cell, ...]:
        # Ids are reassigned in order. A pending cell lost its request and is
        # editable again; a resolved tail gets a fresh cell after it.
        seeded = []
        for cell in cells:
            if cell.resolved:
                new = Cell(id=self._next_id, input=cell.input, output=cell.output_text,
                           status=CellStatus.RESOLVED)
            else:
                new = Cell(id=self._next_id, input=cell.input)
            seeded.append(new)
            self._next_id += 1
        if not seeded or seeded[-1].resolved:
            seeded.append(self._new_cell())
        return tuple(seeded)

    # -- state ------------------------------------------------------------

    @property
    def cells(self) -> tuple[Cell, ...]:
        return self._cells

    @property
    def repl_id(self) -> Optional[int]:
        return self._repl_id

    @property
    def session_available(self) -> bool:
        return self._repl_id is not None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def bind_session(self, repl_id: int) -> None:
        """Enable runs once the session id is known. The id never changes after that."""
        if self._repl_id is not None and self._repl_id != repl_id:
            raise ValueError(f"Notebook already bound to repl {self._repl_id}")
        self._repl_id = repl_id

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with every new snapshot. Returns a cleanup function."""
        self._listeners.append(listener)

        def remove() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass
        return remove

    def transcript(self) -> list[dict[str, Any]]:
        return [cell.to_dict() for cell in self._cells]

    def _new_cell(self) -> Cell:
        cell = Cell(id=self._next_id)
        self._next_id += 1
        return cell

    def _find(self, cell_id: int) -> Optional[Cell]:
        for cell in self._cells:
            if cell.id == cell_id:
                return cell
        return None

    def _commit(self, cells: tuple[Cell, ...]) -> None:
        self._cells = cells
        for listener in list(self._listeners):
            try:
                listener(cells)
            except Exception:
                logger.exception("Notebook listener failed")

    def _replace(self, cell_id: int, new: Cell) -> None:
        self._commit(tuple(new if c.id == cell_id else c for c in self._cells))

    # -- editing ----------------------------------------------------------

    def update_input(self, index: int, text: str) -> bool:
        """Replace an editable cell's input. Returns False when ignored."""
        if self._closed or not 0 <= index < len(self._cells):
            return False
        cell = self._cells[index]
        if not cell.editable:
            return False
        self._replace(cell.id, cell.with_input(text))
        self._schedule_resize(cell.id)
        return True

    def _schedule_resize(self, cell_id: int) -> None:
        # keyed by id: indices are not stable across appends
        if self._on_resize is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._on_resize(cell_id)
            return
        old = self._resize_timers.pop(cell_id, None)
        if old:
            old.cancel()
        self._resize_timers[cell_id] = loop.call_later(self._resize_delay_s, self._fire_resize, cell_id)

    def _fire_resize(self, cell_id: int) -> None:
        self._resize_timers.pop(cell_id, None)
        if self._on_resize is not None and not self._closed:
            self._on_resize(cell_id)

    # -- running ----------------------------------------------------------

    def _runnable(self, index: int) -> bool:
        if self._closed or self._repl_id is None:
            return False
        return 0 <= index < len(self._cells) and self._cells[index].editable

    async def run_cell(self, index: int) -> Optional[Cell]:
        """Evaluate cell ``index`` and return it resolved.

        Returns None without doing anything when the session is unavailable,
        the index is out of range, or the cell is not editable. Evaluation
        failures never raise; they become the cell's output.
        """
        if not self._runnable(index):
            if self._repl_id is None:
                logger.debug(f"run_cell({index}) ignored: session unavailable")
            return None
        cell = self._cells[index]
        text = cell.input
        grow = index == len(self._cells) - 1
        repl_id = self._repl_id
        self._replace(cell.id, cell.mark_pending())

        logger.debug(f"Evaluating cell {cell.id} in repl {repl_id}")
        output = await self._evaluate(repl_id, text)  # type: ignore[arg-type]

        if self._closed:
            logger.debug(f"Dropping response for cell {cell.id}: notebook closed")
            return None
        self.apply_result(cell.id, output, grow=grow)
        return self._find(cell.id)

    async def _evaluate(self, repl_id: int, text: str) -> str:
        try:
            return await self._dispatcher.dispatch(self._repl.eval(repl_id, text))
        except HttpError as e:
            return server_error_text(e.status_code, e.body)
        except Exception as e:
            return str(e) or type(e).__name__

    def apply_result(self, cell_id: int, output: str, grow: bool = False) -> bool:
        """Resolve cell ``cell_id`` with ``output``; append a fresh cell if ``grow``.

        A cell that is already resolved is left alone, so a duplicated
        response neither rewrites it nor appends a second cell.
        """
        target = self._find(cell_id)
        if self._closed or target is None or target.resolved:
            return False
        cells = tuple(c.resolve(output) if c.id == cell_id else c for c in self._cells)
        if grow:
            cells += (self._new_cell(),)
        self._commit(cells)
        logger.debug(f"Cell {cell_id} resolved")
        return True

    def submit(self, index: int) -> Optional[asyncio.Task[Optional[Cell]]]:
        """Start ``run_cell(index)`` in the background and return its task."""
        if not self._runnable(index):
            return None
        task = asyncio.ensure_future(self.run_cell(index))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait until every submitted run has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def close(self) -> None:
        """Stop applying responses. In-flight requests are left to finish and dropped."""
        self._closed = True
        for timer in self._resize_timers.values():
            timer.cancel()
        self._resize_timers.clear()
        self._listeners.clear()
