"""
GCLI basic types: string, number, blank, delegate, array and union.

Overview
- StringType ("string")
  • Any text is VALID, the empty text included; the value is the text itself.

- NumberType ("number")
  • Options: min, max (numbers or zero-argument callables, None for no
    bound), step (default 1), allow_float.
  • Whitespace-only text is INCOMPLETE, anything int() (or float()) rejects is
    an ERROR, values out of bounds are ERRORs.
  • increment/decrement snap to the step and clamp to the bounds.

- BlankType ("blank")
  • A placeholder type: always VALID, never a value.

- DelegateType ("delegate")
  • Option delegate_type(context): returns the real type (instance, name or
    spec) for the current state of the requisition, e.g. from the value of a
    sibling parameter read with context.value_of().

- ArrayType ("array")
  • Option subtype (default "string", with a MissingSubtypeWarning).
  • Parses an ArrayArgument element by element into an ArrayConversion.

- UnionType ("union")
  • Option alternatives: type names/specs, most specific first.
  • The first VALID alternative wins; its value is {"type": name, name: value}.
"""
import asyncio
import logging as logmod
import math
from numbers import Number

from .argument import ArgumentKind, ArrayArgument
from .conversion import ArrayConversion, Conversion, Status
from .faults import ArgumentMismatchError, FaultCode, MissingSubtypeWarning, getdoc
from .tokenizer import tokenize
from .types import Type
from .utils import Unset

logging = logmod.getLogger(__name__)


class StringType(Type):
    name = "string"

    def parse(self, arg, context=Unset, /):
        return Conversion(arg.text, arg)

    def stringify(self, value, context=Unset, /):
        if value is None or value is Unset:
            return ""
        return str(value)


class NumberType(Type):
    """
    Integer (or float) parameter with optional bounds.

    Parameters
    - min / max: number, callable returning a number, or None (unbounded).
    - step: positive number used by increment/decrement.
    - allow_float: parse with float() instead of int().
    """
    name = "number"

    def __init__(self, *, min=None, max=None, step=1, allow_float=False, types=Unset):
        super().__init__(types=types)
        for field, bound in (("min", min), ("max", max)):
            if bound is not None and not callable(bound) and not _is_number(bound):
                raise TypeError(f"{type(self).__name__} {field!r} must be a number, a callable or None")
        if not _is_number(step) or step <= 0:
            raise ValueError(f"{type(self).__name__} 'step' must be a positive number")
        self._min = min
        self._max = max
        self.step = step
        self.allow_float = bool(allow_float)

    @property
    def min(self):
        return self._min() if callable(self._min) else self._min

    @property
    def max(self):
        return self._max() if callable(self._max) else self._max

    def parse(self, arg, context=Unset, /):
        if not arg.text.strip():
            return Conversion(Unset, arg, Status.INCOMPLETE)

        try:
            value = (float if self.allow_float else int)(arg.text.strip())
        except ValueError:
            return Conversion(Unset, arg, Status.ERROR, "can't convert '%s' to a number" % arg.text)

        maximum = self.max
        if maximum is not None and value > maximum:
            return Conversion(Unset, arg, Status.ERROR,
                              "%s is greater than the maximum allowed (%s)" % (value, maximum))
        minimum = self.min
        if minimum is not None and value < minimum:
            return Conversion(Unset, arg, Status.ERROR,
                              "%s is smaller than the minimum allowed (%s)" % (value, minimum))
        return Conversion(value, arg)

    def stringify(self, value, context=Unset, /):
        if value is None or value is Unset:
            return ""
        return str(value)

    def increment(self, value, context=Unset, /):
        if not _is_number(value):
            return self._clamp(self.min if self.min is not None else 0)
        return self._clamp(math.floor((value + self.step) / self.step) * self.step)

    def decrement(self, value, context=Unset, /):
        if not _is_number(value):
            return self._clamp(self.max if self.max is not None else 1)
        return self._clamp(math.ceil((value - self.step) / self.step) * self.step)

    def _clamp(self, value):
        minimum = self.min
        if minimum is not None and value < minimum:
            return minimum
        maximum = self.max
        if maximum is not None and value > maximum:
            return maximum
        return value

    def __repr__(self):
        return f"NumberType(min={self._min!r}, max={self._max!r}, step={self.step!r})"


def _is_number(value):
    return isinstance(value, Number) and not isinstance(value, bool) and not (
        isinstance(value, float) and math.isnan(value)
    )


class BlankType(Type):
    name = "blank"

    def parse(self, arg, context=Unset, /):
        return Conversion(Unset, arg)

    def stringify(self, value, context=Unset, /):
        return ""


class DelegateType(Type):
    """
    Forward every operation to the type returned by delegate_type(context).

    delegate_type may return a Type, a registered name or a spec mapping; the
    result is resolved through the registry on every call, so the delegated
    type follows the rest of the input.
    """
    name = "delegate"

    def __init__(self, *, delegate_type=Unset, types=Unset):
        super().__init__(types=types)
        if not callable(delegate_type):
            raise TypeError(f"{type(self).__name__} 'delegate_type' must be a callable returning a type")
        self.delegate_type = delegate_type

    def get_type(self, context=Unset, /):
        return self.resolve_type(self.delegate_type(context))

    def parse(self, arg, context=Unset, /):
        return self.get_type(context).parse(arg, context)

    async def parse_async(self, arg, context=Unset, /):
        return await self.get_type(context).parse_async(arg, context)

    def stringify(self, value, context=Unset, /):
        return self.get_type(context).stringify(value, context)

    def increment(self, value, context=Unset, /):
        return self.get_type(context).increment(value, context)

    def decrement(self, value, context=Unset, /):
        return self.get_type(context).decrement(value, context)


class ArrayType(Type):
    name = "array"

    def __init__(self, *, subtype=Unset, types=Unset):
        super().__init__(types=types)
        if subtype is Unset:
            self._trigger(MissingSubtypeWarning(
                "array type has no subtype, assuming 'string'",
                title="missing subtype",
                code=FaultCode.MISSING_SUBTYPE,
                hint="declare the type as {'name': 'array', 'subtype': ...}",
                docs=getdoc(FaultCode.MISSING_SUBTYPE)
            ))
            subtype = "string"
        self.subtype = self.resolve_type(subtype)

    def _check(self, arg):
        if arg.kind is not ArgumentKind.ARRAY:
            self._trigger(ArgumentMismatchError(
                "array type can't parse %r" % (arg,),
                title="non-array argument",
                code=FaultCode.NON_ARRAY_ARGUMENT,
                hint="wrap the arguments in an ArrayArgument",
                docs=getdoc(FaultCode.NON_ARRAY_ARGUMENT)
            ))

    def parse(self, arg, context=Unset, /):
        self._check(arg)
        return ArrayConversion([self.subtype.parse(item, context) for item in arg.get_arguments()], arg)

    def parse_string(self, text, context=Unset, /):
        return self.parse(ArrayArgument(tokenize(text) if text.strip() else ()), context)

    async def parse_async(self, arg, context=Unset, /):
        self._check(arg)
        conversions = await asyncio.gather(*(self.subtype.parse_async(item, context) for item in arg.get_arguments()))
        return ArrayConversion(conversions, arg)

    def stringify(self, value, context=Unset, /):
        if value is None or value is Unset:
            return ""
        return " ".join(self.subtype.stringify(item, context) for item in value)

    def get_blank(self, context=Unset, /):
        return ArrayConversion([], ArrayArgument())

    def __repr__(self):
        return f"ArrayType(subtype={self.subtype!r})"


class UnionType(Type):
    """
    Try several types on the same argument, in order.

    Outcome
    - the first VALID alternative: VALID, value {"type": name, name: value};
    - else the first INCOMPLETE alternative: INCOMPLETE, no value;
    - else ERROR.
    Predictions take one candidate from each alternative in turn, without
    duplicates, up to max_predictions.
    """
    name = "union"

    def __init__(self, *, alternatives=(), types=Unset):
        super().__init__(types=types)
        if isinstance(alternatives, str) or not alternatives:
            raise TypeError(f"{type(self).__name__} 'alternatives' must be a non-empty sequence of types")
        self.alternatives = [self.resolve_type(alternative) for alternative in alternatives]

    def parse(self, arg, context=Unset, /):
        return self._choose(arg, [alternative.parse(arg, context) for alternative in self.alternatives])

    async def parse_async(self, arg, context=Unset, /):
        conversions = await asyncio.gather(*(alternative.parse_async(arg, context) for alternative in self.alternatives))
        return self._choose(arg, list(conversions))

    def _choose(self, arg, conversions):
        def predictions():
            candidates = [conversion.get_predictions() for conversion in conversions]
            merged = []
            for index in range(max(map(len, candidates), default=0)):
                for candidate in candidates:
                    if len(merged) >= self.max_predictions:
                        return merged
                    if index < len(candidate) and candidate[index] not in merged:
                        merged.append(candidate[index])
            return merged

        fallback = Unset
        for alternative, conversion in zip(self.alternatives, conversions):
            status = conversion.get_status(arg)
            if status is Status.VALID:
                return Conversion({"type": alternative.name, alternative.name: conversion.value}, arg,
                                  Status.VALID, "", predictions)
            if status is Status.INCOMPLETE and fallback is Unset:
                fallback = conversion

        message = "can't use '%s'" % arg.text
        if fallback is not Unset:
            return Conversion(Unset, arg, Status.INCOMPLETE, message, predictions)
        return Conversion(Unset, arg, Status.ERROR, message, predictions)

    def stringify(self, value, context=Unset, /):
        if value is None or value is Unset:
            return ""
        for alternative in self.alternatives:
            if alternative.name == value["type"]:
                return alternative.stringify(value[alternative.name], context)
        return ""

    def __repr__(self):
        return f"UnionType(alternatives={self.alternatives!r})"


__all__ = (
    "StringType",
    "NumberType",
    "BlankType",
    "DelegateType",
    "ArrayType",
    "UnionType",
)
