"""
GCLI execution: what a running command sees and what it leaves behind.

- Output: the record of one exec() (command, arguments, typed and canonical
  text, timing, result or error). Outputs live in the system's
  CommandOutputManager.
- Deferred: a result that arrives later. Commands return one (from
  context.defer()) when they finish outside the call, e.g. from a thread or a
  callback; it can also be awaited.
- ExecutionContext: handed to commands and to types while they parse; gives
  access to the requisition, its environment and document, and to the values
  of sibling parameters.
"""
import asyncio
import concurrent.futures
import logging as logmod
from datetime import datetime

from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

logging = logmod.getLogger(__name__)


class Output:
    """
    One command run.

    Attributes
    - command, args, typed, canonical, hidden: what was run and how it was typed.
    - start / end: datetimes; duration: end - start (a timedelta).
    - data: the command's result, or the exception when error is True.
    - completed: set by complete().
    - future: the pending result (asyncio future or Deferred) when the
      command answered asynchronously.
    """

    def __init__(self, command, args, /, *, typed="", canonical="", hidden=False):
        self.command = command
        self.args = dict(args)
        self.typed = typed
        self.canonical = canonical
        self.hidden = bool(hidden)

        self.data = Unset
        self.error = False
        self.completed = False
        self.future = Unset
        self.manager = None
        self.start = datetime.now()
        self.end = Unset
        self.duration = Unset

    def complete(self, data, /, error=False):
        self.data = data
        self.error = bool(error)
        self.end = datetime.now()
        self.duration = self.end - self.start
        self.completed = True
        if self.manager is not None:
            self.manager.notify(self)

    def __str__(self):
        if self.data is Unset or self.data is None:
            return ""
        return str(self.data)

    def __rich__(self):
        if hasattr(self.data, "__rich__") or hasattr(self.data, "__rich_console__"):
            body = self.data
        else:
            body = Text(str(self), style="bold red" if self.error else "")
        return Panel(
            body,
            title=Text(self.typed or getattr(self.command, "name", ""), style="bold"),
            title_align="left",
            border_style="red" if self.error else ("green" if self.completed else "yellow"),
        )

    def __repr__(self):
        return f"Output({getattr(self.command, 'name', self.command)!r}, completed={self.completed!r}, error={self.error!r})"


class Deferred:
    """
    A command result that will be provided later with resolve() or reject().

    Thread-safe (backed by concurrent.futures.Future) and awaitable from a
    running event loop.
    """

    def __init__(self):
        self._future = concurrent.futures.Future()

    def resolve(self, value=None, /):
        self._future.set_result(value)

    def reject(self, error, /):
        if not isinstance(error, BaseException):
            raise TypeError("reject() argument must be an exception")
        self._future.set_exception(error)

    def done(self):
        return self._future.done()

    def cancelled(self):
        return self._future.cancelled()

    def result(self, timeout=None):
        return self._future.result(timeout)

    def exception(self, timeout=None):
        return self._future.exception(timeout)

    def add_done_callback(self, callback, /):
        self._future.add_done_callback(lambda future: callback(self))

    def __await__(self):
        return asyncio.wrap_future(self._future).__await__()

    def __repr__(self):
        return f"Deferred(done={self.done()!r})"


class ExecutionContext:
    """
    What commands and types can reach while they run.

    value_of(name) reads the value of another parameter: the one computed
    earlier in the same parse pass when there is one, else the current one.
    """

    def __init__(self, requisition, /, interim=Unset):
        self._requisition = requisition
        self._interim = coalesce(interim, {})

    @property
    def requisition(self):
        return self._requisition

    @property
    def system(self):
        return self._requisition.system

    @property
    def environment(self):
        return self._requisition.environment

    @property
    def document(self):
        return self._requisition.document

    def exec(self, *args, **options):
        return self._requisition.exec(*args, **options)

    def update(self, typed, /):
        return self._requisition.update(typed)

    def defer(self):
        return Deferred()

    def value_of(self, name, /):
        if name in self._interim:
            return self._interim[name]
        assignment = self._requisition.get_assignment(name)
        return Unset if assignment is None else assignment.value


def settle(output, future, /):
    """Complete output from a finished asyncio future or Deferred."""
    if future.cancelled():
        output.complete(asyncio.CancelledError(), error=True)
    elif future.exception() is not None:
        logging.info("command %r failed", getattr(output.command, "name", output.command),
                     exc_info=future.exception())
        output.complete(future.exception(), error=True)
    else:
        output.complete(future.result())


__all__ = (
    "Output",
    "Deferred",
    "ExecutionContext",
    "settle",
)
