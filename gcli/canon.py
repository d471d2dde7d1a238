"""
GCLI canon: the registry of commands and their parameters.

What this module provides
- Parameter: a named, typed slot of a command, with its default, short name
  and optional parameter group.
- Command: a (possibly multi-word) name, its parameters and the callable that
  runs it. A command without a callable is a group: it only exists so that
  its sub-commands ("pref set", "pref show") can be found under it.
- Canon: the command registry. Owned by a System and handed to whoever needs
  it (the command type, requisitions); there is no process-wide canon.
- CommandOutputManager: the shared list of command outputs and the watchers
  that display them.

Command specs
    canon.add_command(
        name="echo",
        description="show a message",
        params=[
            {"name": "message", "type": "string"},
            {"name": "loud", "type": "boolean", "short": "l"},
            {"group": "Options", "params": [
                {"name": "times", "type": {"name": "number", "min": 1}, "default": 1},
            ]},
        ],
        exec=lambda args, context: args["message"] * args["times"],
    )

    @canon.command(name="greet", params=[{"name": "who", "type": "string"}])
    def greet(args, context):
        return "hello " + args["who"]

Rules
- Ungrouped parameters are positional as well as named; grouped parameters
  are named only, so groups come after every ungrouped parameter (later
  ungrouped parameters are ignored with a ParameterOrderWarning).
- Boolean parameters always default to False.
- Other defaults must survive stringify() then parse(), or a
  DefaultRoundTripWarning is issued.
"""
import builtins
import inspect
import logging as logmod
import re
from collections import namedtuple
from collections.abc import Mapping

from . import faults
from .basic import DelegateType
from .conversion import Status
from .faults import (
    CommandSpecError,
    DefaultRoundTripWarning,
    FaultCode,
    IgnoredDefaultWarning,
    ParameterOrderWarning,
    ParameterSpecError,
    getdoc,
)
from .selection import BooleanType
from .types import Type
from .utils import Unset, coalesce, mirror, ordinal, rename

logging = logmod.getLogger(__name__)

CanonChange = namedtuple("CanonChange", ("action", "command"))


class Introspectable(type):
    """
    Metaclass exposing __introspectable__ names as read-only properties.

    - each name n gets a property mirroring self._n (see utils.mirror);
    - __typename__ is the class name split on capitals ("Parameter" ->
      "parameter"), used in messages;
    - __repr__ and __rich_repr__ list the __displayable__ names (or all the
      introspectable ones).
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
            **options
        )

        @rename("__repr__")
        def __repr__(self):
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join("%s=%r" % pair for pair in self.__rich_repr__()),
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _resolve_type(spec, types):
    if isinstance(spec, Type):
        return spec
    if types is Unset:
        raise TypeError("parameter type %r can't be resolved without a type registry" % (spec,))
    return types.get_type(spec)


class Parameter(metaclass=Introspectable):
    """
    One parameter of a command.

    Parameters
    - name: str, the long name (typed as '--name').
    - type: Type, type name or type spec; resolved through types.
    - description / manual: help texts.
    - default: value used when nothing is typed; Unset makes the parameter
      required.
    - short: single character (typed as '-s').
    - group: title of the parameter group, Unset for positional parameters.
    - hidden: left out of help and predictions.
    - command: the owning command (set by Command).
    - types / trigger: the registry used to resolve the type and the callable
      used to surface faults.
    """
    __introspectable__ = ("name", "type", "description", "manual", "default", "short", "group", "hidden")
    __displayable__ = ("name", "type", "default")

    def __init__(
        self,
        name,
        type="string",
        /,
        *,
        description=Unset,
        manual=Unset,
        default=Unset,
        short=Unset,
        group=Unset,
        hidden=False,
        command=Unset,
        types=Unset,
        trigger=Unset,
    ):
        trigger = coalesce(trigger, types.trigger if types is not Unset else faults.trigger)
        owner = command.name if command is not Unset else "unnamed"

        if not isinstance(name, str) or not name or " " in name or name.startswith("-"):
            trigger(ParameterSpecError(
                "parameter %r of %r has no usable name" % (name, owner),
                title="unnamed parameter",
                code=FaultCode.UNNAMED_PARAMETER,
                hint="give every parameter a 'name' without spaces or leading dashes",
                docs=getdoc(FaultCode.UNNAMED_PARAMETER)
            ))
        if short is not Unset and (not isinstance(short, str) or len(short) != 1 or short in " -"):
            raise ValueError(f"{builtins.type(self).__typename__} 'short' must be a single character")
        if description is not Unset and not isinstance(description, str):
            raise TypeError(f"{builtins.type(self).__typename__} 'description' must be a string")

        self._name = name
        self._type = _resolve_type(type, types)
        self._description = description
        self._manual = manual
        self._short = short
        self._group = group
        self._hidden = bool(hidden)
        self.command = command

        if isinstance(self._type, BooleanType):
            if default is not Unset and default is not False:
                trigger(IgnoredDefaultWarning(
                    "boolean parameter %s/%s can't have a default, ignoring %r" % (owner, name, default),
                    title="ignored default",
                    code=FaultCode.IGNORED_DEFAULT,
                    hint="boolean parameters always default to false",
                    docs=getdoc(FaultCode.IGNORED_DEFAULT)
                ))
            default = False
        elif default is not Unset and default is not None and not isinstance(self._type, DelegateType):
            conversion = self._type.parse_string(self._type.stringify(default))
            if conversion.get_status() is not Status.VALID:
                trigger(DefaultRoundTripWarning(
                    "default of %s/%s doesn't survive a round trip (status %s)" % (
                        owner, name, conversion.get_status().name
                    ),
                    title="default round trip",
                    code=FaultCode.DEFAULT_ROUND_TRIP,
                    hint="use a default the %r type can stringify and parse back" % self._type.name,
                    docs=getdoc(FaultCode.DEFAULT_ROUND_TRIP)
                ))
        self._default = default

    @property
    def is_data_required(self):
        return self._default is Unset

    @property
    def is_positional_allowed(self):
        return self._group is Unset

    def is_known_as(self, text, /):
        if text == "--" + self._name:
            return True
        return self._short is not Unset and text == "-" + self._short


class Command(metaclass=Introspectable):
    """
    A registered command.

    Parameters
    - name: str, words separated by single spaces; all but the last word name
      the parent group.
    - params: Parameter objects, parameter specs (mappings with 'name',
      'type' and Parameter options) and group specs
      ({"group": "Title", "params": [...]}).
    - exec: callable(args, context), or callable(*values) when functional is
      set; Unset for group commands.
    - description / manual / return_type / hidden: metadata.
    """
    __introspectable__ = ("name", "params", "exec", "description", "manual", "return_type", "hidden", "functional")
    __displayable__ = ("name", "params", "description")

    def __init__(
        self,
        name,
        /,
        *,
        params=(),
        exec=Unset,
        description=Unset,
        manual=Unset,
        return_type="string",
        hidden=False,
        functional=False,
        types=Unset,
        trigger=Unset,
    ):
        trigger = coalesce(trigger, types.trigger if types is not Unset else faults.trigger)

        if not isinstance(name, str) or not name.strip():
            trigger(CommandSpecError(
                "all registered commands must have a name, got %r" % (name,),
                title="unnamed command",
                code=FaultCode.UNNAMED_COMMAND,
                hint="give the command a 'name' such as 'echo' or 'pref set'",
                docs=getdoc(FaultCode.UNNAMED_COMMAND)
            ))
        if exec is not Unset and not callable(exec):
            raise TypeError(f"{type(self).__typename__} 'exec' must be callable")

        self._name = " ".join(name.split())
        self._exec = exec
        self._description = description
        self._manual = manual
        self._return_type = return_type
        self._hidden = bool(hidden)
        self._functional = bool(functional)
        self._params = []

        if isinstance(params, (str, Mapping)) or not isinstance(params, (list, tuple)):
            trigger(CommandSpecError(
                "params of %r must be a list" % self._name,
                title="malformed parameters",
                code=FaultCode.MALFORMED_PARAMETERS,
                hint="declare params as a list of parameter specs",
                docs=getdoc(FaultCode.MALFORMED_PARAMETERS)
            ))

        grouped = False
        for spec in params:
            if isinstance(spec, Mapping) and "group" in spec and "params" in spec:
                grouped = True
                for inner in spec["params"]:
                    self._add_parameter(inner, spec["group"], types, trigger)
            elif grouped and (not isinstance(spec, Parameter) or spec.group is Unset):
                trigger(ParameterOrderWarning(
                    "parameters can't come after parameter groups, ignoring %s/%s" % (
                        self._name, spec.name if isinstance(spec, Parameter) else spec.get("name")
                    ),
                    title="parameter order",
                    code=FaultCode.PARAMETER_ORDER,
                    hint="move ungrouped parameters before the first group",
                    docs=getdoc(FaultCode.PARAMETER_ORDER)
                ))
            else:
                self._add_parameter(spec, Unset, types, trigger)

    def _add_parameter(self, spec, group, types, trigger):
        if isinstance(spec, Parameter):
            parameter = spec
            parameter.command = self
        elif isinstance(spec, Mapping):
            options = dict(spec)
            name = options.pop("name", Unset)
            type = options.pop("type", "string")
            options.setdefault("group", group)
            try:
                parameter = Parameter(name, type, **options, command=self, types=types, trigger=trigger)
            except TypeError as error:
                return trigger(CommandSpecError(
                    "bad parameter spec %s/%s: %s" % (self._name, name, error),
                    title="malformed parameters",
                    code=FaultCode.MALFORMED_PARAMETERS,
                    hint="check the parameter options",
                    docs=getdoc(FaultCode.MALFORMED_PARAMETERS)
                ))
        else:
            return trigger(CommandSpecError(
                "can't build a parameter of %r from %r" % (self._name, spec),
                title="malformed parameters",
                code=FaultCode.MALFORMED_PARAMETERS,
                hint="use Parameter objects or mappings with a 'name' and a 'type'",
                docs=getdoc(FaultCode.MALFORMED_PARAMETERS)
            ))

        if self.get_parameter(parameter.name) is not Unset:
            return trigger(CommandSpecError(
                "the %s parameter of %r repeats the name %r" % (ordinal(len(self._params) + 1), self._name, parameter.name),
                title="malformed parameters",
                code=FaultCode.MALFORMED_PARAMETERS,
                hint="rename one of the parameters",
                docs=getdoc(FaultCode.MALFORMED_PARAMETERS)
            ))
        self._params.append(parameter)

    @property
    def is_executable(self):
        return self._exec is not Unset

    @property
    def parent_name(self):
        """Name of the parent group, None for top-level commands."""
        words = self._name.split(" ")
        return " ".join(words[:-1]) if len(words) > 1 else None

    def get_parameter(self, name, /):
        for parameter in self._params:
            if parameter.name == name:
                return parameter
        return Unset

    def find_parameter(self, text, /):
        """
        The parameter text names: '--name' or '-s' exactly, else the only
        parameter whose name starts with what follows '--'. Unset otherwise.
        """
        for parameter in self._params:
            if parameter.is_known_as(text):
                return parameter
        if text.startswith("--") and len(text) > 2:
            matches = [parameter for parameter in self._params if parameter.name.startswith(text[2:])]
            if len(matches) == 1:
                return matches[0]
        return Unset

    def invoke(self, args, context, /):
        """Run the command with the parameter values in args."""
        if not self.is_executable:
            raise TypeError(f"{type(self).__typename__} {self._name!r} is a group and can't be run")
        if self._functional:
            return self._exec(*(args[parameter.name] for parameter in self._params))
        return self._exec(args, context)

    def __call__(self, *args, **kwargs):
        if not self.is_executable:
            raise TypeError(f"{type(self).__typename__} {self._name!r} is a group and can't be called")
        return self._exec(*args, **kwargs)


class Canon:
    """
    Registry of commands, keyed by full name.

    Parameters
    - types: TypeRegistry used to build parameters from specs.
    - trigger: callable surfacing faults (defaults to types.trigger).
    """

    def __init__(self, types, /, *, trigger=Unset):
        self._types = types
        self._trigger = coalesce(trigger, types.trigger)
        self._commands = {}
        self._watchers = []

    def add_command(self, command=Unset, /, **spec):
        """
        Register a Command, or build one from a spec (a mapping, or keyword
        arguments) and register it. Replaces a command of the same name.
        """
        if isinstance(command, Mapping):
            spec = dict(command) | spec
            command = Unset
        if command is Unset:
            spec = dict(spec)
            name = spec.pop("name", Unset)
            command = Command(name, **spec, types=self._types, trigger=self._trigger)
        elif not isinstance(command, Command):
            raise TypeError("add_command() argument must be a command or a command spec")
        elif spec:
            raise TypeError("add_command() can't take a spec along with a command")

        if command.name in self._commands:
            logging.debug("replacing command %r", command.name)
        self._commands[command.name] = command
        logging.debug("added command %r", command.name)
        self._notify(CanonChange("add", command))
        return command

    def command(self, source=Unset, /, **spec):
        """
        Register a function as the exec of a new command, or return a
        decorator that does.

        The name defaults to the function name (underscores read as spaces,
        so pref_set becomes 'pref set') and the description to the first
        line of its docstring.
        """
        if source is Unset:
            @rename("command")
            def wrapper(source):
                return self.command(source, **spec)

            return wrapper

        if not callable(source):
            raise TypeError("command() argument must be callable")

        spec.setdefault("name", getattr(source, "__name__", "").replace("_", " "))
        doc = inspect.getdoc(source)
        if doc:
            spec.setdefault("description", doc.splitlines()[0])
        return self.add_command(exec=source, **spec)

    def remove_command(self, command, /):
        name = command if isinstance(command, str) else command.name
        removed = self._commands.pop(name, None)
        if removed is not None:
            logging.debug("removed command %r", name)
            self._notify(CanonChange("remove", removed))
        return removed

    def get_command(self, name, /):
        return self._commands.get(name)

    def get_commands(self):
        return [self._commands[name] for name in sorted(self._commands)]

    def get_command_names(self):
        return sorted(self._commands)

    def get_children(self, name, /):
        return [command for command in self.get_commands() if command.parent_name == name]

    def watch(self, listener, /):
        if not callable(listener):
            raise TypeError("watch() argument must be callable")
        self._watchers.append(listener)

    def unwatch(self, listener, /):
        try:
            self._watchers.remove(listener)
        except ValueError:
            pass

    def _notify(self, change):
        for listener in list(self._watchers):
            listener(change)

    def __contains__(self, name):
        return (name if isinstance(name, str) else getattr(name, "name", None)) in self._commands

    def __len__(self):
        return len(self._commands)

    def __iter__(self):
        return iter(self.get_commands())


class CommandOutputManager:
    """
    Every Output produced by exec(), in order, plus the watchers that show
    them. Watchers are called when an output is added and when it completes;
    hidden outputs are recorded but never announced.
    """

    def __init__(self):
        self._outputs = []
        self._watchers = []

    def append(self, output, /):
        self._outputs.append(output)
        output.manager = self
        self.notify(output)

    def notify(self, output, /):
        if output.hidden:
            return
        for listener in list(self._watchers):
            listener(output)

    def watch(self, listener, /):
        if not callable(listener):
            raise TypeError("watch() argument must be callable")
        self._watchers.append(listener)

    def unwatch(self, listener, /):
        try:
            self._watchers.remove(listener)
        except ValueError:
            pass

    def clear(self):
        self._outputs.clear()

    def __iter__(self):
        return iter(list(self._outputs))

    def __len__(self):
        return len(self._outputs)

    def __getitem__(self, index):
        return self._outputs[index]


__all__ = (
    "CanonChange",
    "Parameter",
    "Command",
    "Canon",
    "CommandOutputManager",
)
