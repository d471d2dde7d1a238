"""
GCLI system: the object that owns the registries and the configuration.

Scope
- System holds one TypeRegistry, one Canon and one CommandOutputManager, and
  hands them to whatever needs them. Two systems never share commands, types
  or outputs.
- create_system() builds a System with every standard type registered.

Configuration (keyword-only, read-only afterwards)
- max_predictions: cap on the predictions of every type (default 20).
- shell / fancy / colorful: how faults are surfaced (see gcli.faults).
- prog: program name shown in fault headers.
- environment / document: host objects commands reach through their
  execution context.

Example
    system = create_system()
    system.canon.add_command(name="echo", params=[{"name": "message"}],
                             exec=lambda args, context: args["message"])
    requisition = system.requisition()
    requisition.exec("echo hi").data  # 'hi'
"""
import logging as logmod

from . import faults
from .basic import ArrayType, BlankType, DelegateType, NumberType, StringType, UnionType
from .canon import Canon, CommandOutputManager
from .conversion import MAX_PREDICTIONS
from .requisition import Requisition
from .selection import BooleanType, CommandType, SelectionType
from .types import TypeRegistry
from .utils import Unset, mirror

logging = logmod.getLogger(__name__)

STANDARD_TYPES = (
    StringType,
    NumberType,
    BooleanType,
    SelectionType,
    ArrayType,
    UnionType,
    DelegateType,
    BlankType,
)


class System:
    """
    Registries plus configuration. Use create_system() for one that knows the
    standard types; a bare System starts with empty registries.
    """
    environment = mirror("environment")
    document = mirror("document")
    max_predictions = mirror("max_predictions")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    prog = mirror("prog")

    def __init__(
        self,
        *,
        max_predictions=MAX_PREDICTIONS,
        shell=False,
        fancy=False,
        colorful=True,
        prog="gcli",
        environment=Unset,
        document=Unset,
    ):
        if not isinstance(prog, str):
            raise TypeError(f"{type(self).__name__} 'prog' must be a string")
        self._max_predictions = max_predictions
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._prog = prog
        self._environment = environment
        self._document = document

        self.types = TypeRegistry(trigger=self.trigger, max_predictions=max_predictions)
        self.canon = Canon(self.types)
        self.outputs = CommandOutputManager()

    def requisition(self, **options):
        """A new Requisition bound to this system."""
        return Requisition(self, **options)

    def trigger(self, fault, /, **options):
        """Surface fault with this system's rendering options."""
        if (
                not hasattr(fault, "__trigger__") or
                not callable(fault.__trigger__) or
                not hasattr(fault, "__replace__") or
                not callable(fault.__replace__)
        ):
            raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
        options = {"prog": self._prog} | options
        faults.trigger(fault, **options, shell=self._shell, fancy=self._fancy, colorful=self._colorful)

    def __repr__(self):
        return f"System(prog={self._prog!r}, commands={len(self.canon)}, types={self.types.get_type_names()!r})"


def create_system(**options):
    """A System with string, number, boolean, selection, array, union,
    delegate, blank and command types registered."""
    system = System(**options)
    for type in STANDARD_TYPES:
        system.types.register(type)
    system.types.register(CommandType, commands=system.canon)
    logging.debug("created system with types %s", system.types.get_type_names())
    return system


__all__ = (
    "STANDARD_TYPES",
    "System",
    "create_system",
)
