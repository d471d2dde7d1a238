"""
GCLI selection types: choosing one value from a list of named candidates.

Scope
- Lookup: where the candidates come from (a static list, a mapping, a
  function of the execution context, or a coroutine function) and whether
  they are cached.
- find_predictions(): the matching rules shared by every selection-like type
  (prefix, then infix, then spelling correction).
- SelectionType ("selection"), BooleanType ("boolean") and CommandType
  ("command"). Boolean and command types hold what they need (a private
  selection, a canon) instead of inheriting from SelectionType.

Matching
- Prefix matches come first, in lookup order; an exact match is moved to the
  front so it wins over longer names sharing the prefix.
- Infix matches are added while there are fewer than infix_threshold
  predictions, without duplicates.
- When nothing matched, spell.correct() may supply one candidate.

Stepping
- increment() moves towards the start of the list and decrement() towards
  the end, both wrapping. Keys bound to "up" and "down" in a UI depend on
  this direction.
"""
import asyncio
import inspect
import logging as logmod
from collections.abc import Mapping, Sequence

from . import spell
from .argument import Argument, ArgumentKind
from .conversion import Conversion, Prediction, Status
from .types import Type
from .utils import Unset

logging = logmod.getLogger(__name__)


def _to_entry(item):
    if isinstance(item, Prediction):
        return item
    if isinstance(item, str):
        return Prediction(item, item)
    if isinstance(item, Mapping):
        try:
            return Prediction(str(item["name"]), item.get("value", item["name"]), item.get("description", ""))
        except KeyError:
            raise TypeError("lookup entries given as mappings must have a 'name'") from None
    if isinstance(item, Sequence) and len(item) == 2:
        name, value = item
        return Prediction(str(name), value)
    raise TypeError("lookup entries must be names, (name, value) pairs, mappings or predictions")


def _to_entries(data):
    if data is None:
        return []
    if isinstance(data, Mapping):
        return [Prediction(str(name), value) for name, value in data.items()]
    if isinstance(data, str) or not isinstance(data, Sequence):
        raise TypeError("lookup data must be a sequence or a mapping, not %r" % type(data).__name__)
    return [_to_entry(item) for item in data]


class Lookup:
    """
    Source of the candidates of a selection.

    Parameters
    - source: sequence or mapping (static), callable returning one (called with
      the execution context when it accepts an argument), or coroutine
      function (asynchronous).
    - cache: keep the first result of a callable source.
    - force_async: route static data through the asynchronous path, so code
      depending on asynchronous lookups can be exercised without a real
      asynchronous source.

    resolve() never blocks: for asynchronous sources it returns the last
    result of resolve_async(), or Unset while nothing has arrived yet.
    """

    def __init__(self, source, /, *, cache=False, force_async=False):
        self._source = source
        self._cache = bool(cache)
        self._force_async = bool(force_async)
        self._latest = Unset

        if callable(source):
            self._static = False
            self._coroutine = inspect.iscoroutinefunction(source)
            try:
                self._arity = len(inspect.signature(source).parameters)
            except (TypeError, ValueError):
                self._arity = 0
        else:
            self._static = True
            self._coroutine = False
            self._data = _to_entries(source)

    @property
    def is_async(self):
        return self._coroutine or self._force_async

    def _call(self, context):
        return self._source(context) if self._arity else self._source()

    def resolve(self, context=Unset, /):
        if self.is_async:
            return self._latest
        if self._static:
            return list(self._data)
        if self._cache and self._latest is not Unset:
            return self._latest
        entries = _to_entries(self._call(context))
        if self._cache:
            self._latest = entries
        return entries

    async def resolve_async(self, context=Unset, /):
        if not self.is_async:
            return self.resolve(context)
        if self._cache and self._latest is not Unset:
            return self._latest

        if self._static:
            await asyncio.sleep(0)
            entries = list(self._data)
        elif self._coroutine:
            entries = _to_entries(await self._call(context))
        else:
            await asyncio.sleep(0)
            entries = _to_entries(self._call(context))

        logging.debug("lookup fetched %d entries", len(entries))
        self._latest = entries
        return entries

    def __repr__(self):
        return f"Lookup({self._source!r}, cache={self._cache!r}, force_async={self._force_async!r})"


def find_predictions(text, entries, maximum, /, *, infix_threshold=5, exclude=None, correct=True):
    """
    Candidates for text among entries, best first, at most maximum of them.

    Parameters
    - exclude: predicate removing entries from prefix/infix matching.
    - correct: fall back to spelling correction when nothing matched.
    """
    candidates = [entry for entry in entries if exclude is None or not exclude(entry)]

    predictions = [entry for entry in candidates if entry.name.startswith(text)][:maximum]
    for index, entry in enumerate(predictions):
        if entry.name == text:
            predictions.insert(0, predictions.pop(index))
            break

    if len(predictions) < infix_threshold:
        for entry in candidates:
            if len(predictions) >= maximum:
                break
            if text in entry.name and all(entry is not prediction for prediction in predictions):
                predictions.append(entry)

    if not predictions and correct:
        corrected = spell.correct(text, [entry.name for entry in candidates])
        if corrected is not None:
            predictions = [entry for entry in candidates if entry.name == corrected][:1]

    return predictions


class SelectionType(Type):
    """
    One value out of a set of named candidates.

    Parameters
    - lookup / data: the candidates (see Lookup); a Lookup instance is used
      as given. Exactly one of them is required.
    - cache, force_async: Lookup options.

    Parse
    - the first prediction is an exact match: VALID with its value;
    - some predictions: INCOMPLETE;
    - none: ERROR.
    """
    name = "selection"

    def __init__(self, *, lookup=Unset, data=Unset, cache=False, force_async=False, types=Unset):
        super().__init__(types=types)
        if (lookup is Unset) == (data is Unset):
            raise TypeError(f"{type(self).__name__} needs exactly one of 'lookup' and 'data'")
        source = lookup if lookup is not Unset else data
        if isinstance(source, Lookup):
            self.lookup = source
        else:
            self.lookup = Lookup(source, cache=cache, force_async=force_async)

    def get_lookup(self, context=Unset, /):
        return self.lookup.resolve(context)

    def find_predictions(self, text, entries, /):
        return find_predictions(text, entries, self.max_predictions)

    def parse(self, arg, context=Unset, /):
        entries = self.get_lookup(context)
        if entries is Unset:
            return Conversion(Unset, arg, Status.INCOMPLETE, "choices for '%s' are still loading" % arg.text)
        return self._convert(arg, entries)

    async def parse_async(self, arg, context=Unset, /):
        return self._convert(arg, await self.lookup.resolve_async(context))

    def _convert(self, arg, entries):
        predictions = self.find_predictions(arg.text, entries)
        if not predictions:
            return Conversion(Unset, arg, Status.ERROR, "can't use '%s'" % arg.text, predictions)
        if predictions[0].name == arg.text:
            return Conversion(predictions[0].value, arg, Status.VALID, "", predictions)
        return Conversion(Unset, arg, Status.INCOMPLETE, "", predictions)

    def stringify(self, value, context=Unset, /):
        if value is None or value is Unset:
            return ""
        entries = self.get_lookup(context)
        index = _find_value(entries, value)
        if index == -1:
            return str(value)
        return entries[index].name

    def increment(self, value, context=Unset, /):
        entries = self.get_lookup(context)
        if not entries:
            return Unset
        index = _find_value(entries, value)
        if index == -1:
            index = 1
        index -= 1
        if index < 0:
            index = len(entries) - 1
        return entries[index].value

    def decrement(self, value, context=Unset, /):
        entries = self.get_lookup(context)
        if not entries:
            return Unset
        index = _find_value(entries, value)
        if index == -1:
            index = 0
        index += 1
        if index >= len(entries):
            index = 0
        return entries[index].value

    def get_default(self, context=Unset, /):
        entries = self.get_lookup(context)
        return entries[0].value if entries else Unset

    def __repr__(self):
        return f"SelectionType(lookup={self.lookup!r})"


def _find_value(entries, value):
    if entries is Unset:
        return -1
    for index, entry in enumerate(entries):
        if entry.value is value:
            return index
    for index, entry in enumerate(entries):
        if type(entry.value) is type(value) and entry.value == value:
            return index
    return -1


class BooleanType(Type):
    """
    true/false, plus bare '--flag' (TRUE_NAMED) and absent flags (FALSE_NAMED).
    """
    name = "boolean"

    def __init__(self, *, types=Unset):
        super().__init__(types=types)
        self.selection = SelectionType(data=[("false", False), ("true", True)], types=types)

    def parse(self, arg, context=Unset, /):
        match arg.kind:
            case ArgumentKind.TRUE_NAMED:
                return Conversion(True, arg)
            case ArgumentKind.FALSE_NAMED:
                return Conversion(False, arg)
            case _:
                return self.selection.parse(arg, context)

    def stringify(self, value, context=Unset, /):
        if value is None or value is Unset:
            return ""
        return "true" if value else "false"

    def increment(self, value, context=Unset, /):
        return self.selection.increment(value, context)

    def decrement(self, value, context=Unset, /):
        return self.selection.decrement(value, context)

    def get_blank(self, context=Unset, /):
        return Conversion(False, Argument(), Status.VALID, "", self.selection.get_lookup)

    def get_default(self, context=Unset, /):
        return False


class CommandType(Type):
    """
    A command of the canon, by its (possibly multi-word) name.

    - an exact executable name is VALID;
    - an exact group name is INCOMPLETE but keeps the group as value, so the
      requisition can go on matching its sub-commands;
    - otherwise predictions make it INCOMPLETE and their absence an ERROR.

    Sub-commands are left out of predictions while nothing is typed, and
    hidden commands are never predicted. Spelling correction is only tried
    on single words: a run of words that matches nothing is not a command.
    """
    name = "command"

    def __init__(self, *, commands=Unset, types=Unset):
        super().__init__(types=types)
        if commands is Unset:
            raise TypeError(f"{type(self).__name__} 'commands' must be a canon")
        self.commands = commands

    def get_lookup(self, context=Unset, /):
        return [
            Prediction(command.name, command, command.description or "")
            for command in self.commands.get_commands()
        ]

    def find_predictions(self, text, /):
        def excluded(entry):
            return entry.value.hidden or (not text and " " in entry.name)

        return find_predictions(
            text,
            self.get_lookup(),
            self.max_predictions,
            infix_threshold=self.max_predictions / 2,
            exclude=excluded,
            correct=" " not in text,
        )

    def parse(self, arg, context=Unset, /):
        text = arg.text

        def predictions():
            return self.find_predictions(text)

        command = self.commands.get_command(text)
        if command is not None:
            if command.is_executable:
                return Conversion(command, arg, Status.VALID, "", predictions)
            return Conversion(command, arg, Status.INCOMPLETE, "", predictions)

        if self.find_predictions(text):
            return Conversion(Unset, arg, Status.INCOMPLETE, "", predictions)
        return Conversion(Unset, arg, Status.ERROR, "can't use '%s'" % text, predictions)

    def stringify(self, value, context=Unset, /):
        if value is None or value is Unset:
            return ""
        return value if isinstance(value, str) else value.name

    def __repr__(self):
        return f"CommandType(commands={len(self.commands)})"


__all__ = (
    "Lookup",
    "find_predictions",
    "SelectionType",
    "BooleanType",
    "CommandType",
)
