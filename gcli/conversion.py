"""
GCLI conversions: the outcome of parsing one argument with one type.

Scope
- Status: how good a conversion is (VALID < INCOMPLETE < ERROR).
- Prediction: one completion candidate.
- Conversion: value + source argument + status + message + predictions.
- ArrayConversion: the element-wise conversion of an ArrayArgument.

Value conventions
- Unset: nothing was provided (or nothing could be derived).
- None: provided, but explicitly empty.
- A status other than VALID means the value is absent or unreliable.
"""
from collections import namedtuple
from collections.abc import Iterable
from enum import IntEnum

from .argument import Argument
from .utils import Unset

MAX_PREDICTIONS = 20


class Status(IntEnum):
    """
    conversion quality, ordered from best to worst.

    - VALID: the value can be used.
    - INCOMPLETE: not valid yet, but more typing could make it valid.
    - ERROR: no amount of extra typing will help.
    """
    VALID = 0
    INCOMPLETE = 1
    ERROR = 2

    @classmethod
    def combine(cls, *statuses):
        """The worst of the given statuses; nested iterables are flattened."""
        combined = cls.VALID
        for status in statuses:
            if isinstance(status, Iterable):
                status = cls.combine(*status)
            if status > combined:
                combined = cls(status)
        return combined


Prediction = namedtuple("Prediction", ("name", "value", "description", "incomplete"), defaults=("", False))
Prediction.__doc__ = """
one completion candidate.

- name: the text that would be typed.
- value: the value the name stands for.
- description: optional help text.
- incomplete: choosing it still needs more typing (no space is added).
"""


class Conversion:
    """
    the result of parsing an argument with a type.

    parameters
    - value: the converted value (Unset when there is none).
    - arg: the Argument that was parsed (required).
    - status: Status, VALID by default.
    - message: why the status is not VALID.
    - predictions: a sequence of Prediction, or a zero-argument callable that
      computes them on demand.
    """

    def __init__(self, value, arg, status=Status.VALID, message="", predictions=()):
        if not isinstance(arg, Argument):
            raise TypeError("Conversion 'arg' must be an argument")
        if not isinstance(status, Status):
            raise TypeError("Conversion 'status' must be a status")
        self.value = value
        self.arg = arg
        self.message = message
        self._status = status
        self._predictions = predictions

    def assign(self, assignment, /):
        self.arg.assign(assignment)

    def is_data_provided(self):
        return self.value is not Unset or self.arg.text != ""

    def equals(self, other, /):
        if self is other:
            return True
        if not isinstance(other, Conversion):
            return False
        return self.value_equals(other) and self.arg_equals(other)

    def value_equals(self, other, /):
        try:
            return self.value is other.value or bool(self.value == other.value)
        except (TypeError, ValueError):
            return False

    def arg_equals(self, other, /):
        return self.arg.equals(other.arg)

    def get_status(self, arg=Unset, /):
        return self._status

    @property
    def status(self):
        return self.get_status()

    def get_predictions(self):
        if callable(self._predictions):
            return list(self._predictions())
        return list(self._predictions or ())

    def __str__(self):
        return str(self.arg)

    def __repr__(self):
        return f"{type(self).__name__}({self.value!r}, {self.arg!r}, {self._status.name})"


class ArrayConversion(Conversion):
    """
    element-wise conversion for an array parameter.

    - value: list of element values.
    - status: the combined status of the elements.
    - get_status(arg) narrows to the element built from arg.
    """

    def __init__(self, conversions, arg):
        self.conversions = list(conversions)
        super().__init__(
            [conversion.value for conversion in self.conversions],
            arg,
            Status.combine(conversion.get_status() for conversion in self.conversions),
        )

    def assign(self, assignment, /):
        for conversion in self.conversions:
            conversion.assign(assignment)
        self.arg.assign(assignment)

    def get_status(self, arg=Unset, /):
        if arg is not Unset:
            for conversion in self.conversions:
                if conversion.arg is arg or any(part is arg for part in conversion.arg.get_args()):
                    return conversion.get_status()
        return self._status

    def is_data_provided(self):
        return len(self.conversions) > 0

    def value_equals(self, other, /):
        if not isinstance(other, ArrayConversion):
            return False
        if len(self.conversions) != len(other.conversions):
            return False
        return all(mine.value_equals(theirs) for mine, theirs in zip(self.conversions, other.conversions))

    def __str__(self):
        return "[ " + ", ".join(str(conversion) for conversion in self.conversions) + " ]"


__all__ = (
    "MAX_PREDICTIONS",
    "Status",
    "Prediction",
    "Conversion",
    "ArrayConversion",
)
