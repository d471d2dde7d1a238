"""
GCLI requisition: typed text bound to a command and its parameters.

Scope
- Assignment: one parameter of the current command and the conversion of
  the argument given to it.
- CommandAssignment: the synthetic parameter holding the command itself.
- UnassignedAssignment: an argument no parameter took.
- Requisition: the state of one command line. update(typed) re-reads the
  whole line; set_assignment(), complete(), increment() and decrement() edit
  it in place; exec() runs it.

Update
- tokenize: the typed text becomes a list of arguments;
- split: the longest run of leading words naming a command (groups keep
  the run going, an executable command or no match at all stop it);
- distribute: named arguments ('--name value', '-s value', a unique
  '--prefix'), then positional ones in declaration order, then array
  parameters; whatever is left is unassigned;
- resolve: every parameter is parsed (or blanked), in declaration order,
  with a context that already sees the values computed earlier in the pass;
- commit: conversions are stored and a ChangeReport is sent to watchers.

The first three steps only look at the text and the parameter metadata, so
update_async() can resolve with awaitable types and still commit in one go;
a pass that finishes after a newer one started is dropped.

A type that raises while parsing (or blanking) its parameter gets an ERROR
conversion carrying the exception message; the rest of the line still parses.

Markup
- Characters of the prefix and suffix of an argument are VALID; characters
  of its text take the status of the assignment that owns it.
- INCOMPLETE is only shown as such at the cursor (and always for the command
  name); anywhere else it is an ERROR.
"""
import asyncio
import inspect
import logging as logmod
import re
from collections import namedtuple
from enum import Enum

from rich.text import Text

from .argument import (
    Argument,
    ArgumentKind,
    ArrayArgument,
    MergedArgument,
    NamedArgument,
    TrueNamedArgument,
)
from .basic import ArrayType, NumberType, StringType
from .canon import Parameter
from .conversion import Conversion, Prediction, Status
from .execution import Deferred, ExecutionContext, Output, settle
from .faults import FaultCode, MissingCommandError, UnknownCommandError, getdoc
from .selection import BooleanType
from .spell import suggest
from .tokenizer import tokenize
from .types import Type
from .utils import Unset, coalesce

logging = logmod.getLogger(__name__)


class Part(Enum):
    PREFIX = "prefix"
    TEXT = "text"
    SUFFIX = "suffix"


ArgTrace = namedtuple("ArgTrace", ("arg", "char", "part"))
StatusMarkup = namedtuple("StatusMarkup", ("status", "string"))
AssignmentChange = namedtuple("AssignmentChange", ("assignment", "conversion", "old_conversion"))
ChangeReport = namedtuple("ChangeReport", ("typed", "command_changed", "assignments", "text_changed"))

_Plan = namedtuple("_Plan", ("typed", "args", "command", "steps", "unassigned"))

_STATUS_STYLES = {
    Status.VALID: "",
    Status.INCOMPLETE: "yellow",
    Status.ERROR: "bold red",
}


def _tokens(arg):
    """The arguments of arg that came from the tokenizer (or stand in for one)."""
    match arg.kind:
        case ArgumentKind.SIMPLE:
            return [arg]
        case ArgumentKind.MERGED | ArgumentKind.ARRAY:
            return [token for part in arg.args for token in _tokens(part)]
        case ArgumentKind.NAMED:
            return _tokens(arg.name_arg) + _tokens(arg.value_arg)
        case ArgumentKind.TRUE_NAMED:
            return [arg] if arg.arg is Unset else _tokens(arg.arg)
        case ArgumentKind.FALSE_NAMED:
            return []


def _failed(name, arg, error):
    """The ERROR conversion standing in for a type that raised."""
    logging.info("type of %r failed on %r", name, arg.text, exc_info=True)
    return Conversion(Unset, arg, Status.ERROR, str(error) or type(error).__name__)


def _differs(value, default):
    if value is default:
        return False
    try:
        return not bool(value == default)
    except (TypeError, ValueError):
        return True


class Assignment:
    """
    A parameter and the conversion currently assigned to it.

    - param_index: position of the parameter in its command (-1 for the
      synthetic command/unassigned parameters).
    """

    def __init__(self, param, param_index, /):
        self.param = param
        self.param_index = param_index
        self.conversion = Unset
        self.set_blank()

    @property
    def arg(self):
        return self.conversion.arg

    @property
    def value(self):
        return self.conversion.value

    def get_message(self):
        return self.conversion.message

    def get_predictions(self):
        return self.conversion.get_predictions()

    def get_prediction_at(self, index=0, /):
        """The index-th prediction, wrapping around; None inside a '--name'."""
        if self.is_in_name():
            return None
        predictions = self.get_predictions()
        if not predictions:
            return None
        return predictions[index % len(predictions)]

    def is_in_name(self):
        return self.arg.kind is ArgumentKind.NAMED and not self.arg.prefix.endswith(" ")

    def set_conversion(self, conversion, /):
        old = self.conversion
        conversion.assign(self)
        self.conversion = conversion
        if old is not Unset and old.equals(conversion):
            return None
        return AssignmentChange(self, conversion, old)

    def set_blank(self, context=Unset, /):
        try:
            conversion = self.param.type.get_blank(context)
        except Exception as error:
            conversion = _failed(self.param.name, Argument(), error)
        return self.set_conversion(conversion)

    def get_status(self, arg=Unset, /):
        if self.param.is_data_required and not self.conversion.is_data_provided():
            return Status.INCOMPLETE
        # optional parameters with nothing typed are fine, even for types
        # that call the empty text INCOMPLETE
        if not self.param.is_data_required and self.arg.is_blank():
            return Status.VALID
        status = self.conversion.get_status(arg)
        if self.arg.unclosed:
            status = Status.combine(status, Status.INCOMPLETE)
        return status

    def __repr__(self):
        return f"{type(self).__name__}({self.param.name!r}, {self.conversion!r})"


class CommandAssignment(Assignment):
    """The assignment of the command itself; never VALID for group commands."""

    def __init__(self, command_type, /):
        super().__init__(Parameter("__command", command_type, description="The command to execute"), -1)

    def get_status(self, arg=Unset, /):
        value = self.conversion.value
        return Status.combine(
            super().get_status(arg),
            Status.VALID if value is not Unset and value.is_executable else Status.INCOMPLETE,
        )


class UnassignedType(Type):
    """
    Parses arguments no parameter wants: text starting with '-' is a
    parameter name still being typed (INCOMPLETE, predicting the '--names'
    not given yet), anything else an ERROR.
    """
    name = "unassigned"

    def __init__(self, requisition, /, *, types=Unset):
        super().__init__(types=types)
        self.requisition = requisition

    def parse(self, arg, context=Unset, /):
        text = arg.text
        if not text.startswith("-"):
            return Conversion(Unset, arg, Status.ERROR, "can't use '%s' here" % text)

        def predictions():
            return [
                Prediction("--" + assignment.param.name, assignment.param, coalesce(assignment.param.description, ""))
                for assignment in self.requisition.get_assignments()
                if assignment.arg.is_blank() and ("--" + assignment.param.name).startswith(text)
            ]

        return Conversion(Unset, arg, Status.INCOMPLETE, "'%s' is not a parameter name yet" % text, predictions)

    def stringify(self, value, context=Unset, /):
        return ""


class UnassignedAssignment(Assignment):
    def __init__(self, requisition, arg, /):
        type = UnassignedType(requisition)
        super().__init__(Parameter("__unassigned", type, description="Arguments no parameter takes"), -1)
        self.is_incomplete_name = arg.text.startswith("-")
        self.set_conversion(type.parse(arg))

    def get_status(self, arg=Unset, /):
        return self.conversion.get_status(arg)


class Requisition:
    """
    The state of one command line, bound to a System.

    Parameters
    - system: the System whose canon, types and output manager are used.
    - environment / document: host objects made available to commands
      through the execution context (default to the system's).
    """

    def __init__(self, system, /, *, environment=Unset, document=Unset):
        self.system = system
        self.environment = coalesce(environment, system.environment)
        self.document = coalesce(document, system.document)
        self.command_assignment = CommandAssignment(system.types.get_type("command"))

        self._assignments = {}
        self._args = []
        self._unassigned = []
        self._watchers = []
        self._generation = 0
        self._typed = Unset

        self.update("")

    @property
    def canon(self):
        return self.system.canon

    # -- access --------------------------------------------------------------

    def get_assignment(self, name_or_index, /):
        if isinstance(name_or_index, int):
            assignments = list(self._assignments.values())
            return assignments[name_or_index] if -len(assignments) <= name_or_index < len(assignments) else None
        return self._assignments.get(name_or_index)

    def get_assignments(self, include_command=False):
        assignments = list(self._assignments.values())
        return [self.command_assignment] + assignments if include_command else assignments

    def get_parameter_names(self):
        return list(self._assignments)

    @property
    def assignment_count(self):
        return len(self._assignments)

    @property
    def unassigned(self):
        return list(self._unassigned)

    def get_args_object(self):
        return {
            name: assignment.value if assignment.conversion.is_data_provided() else assignment.param.default
            for name, assignment in self._assignments.items()
        }

    def get_status(self):
        """
        The status of the whole line. INCOMPLETE is reported as ERROR: the
        line can't be run either way.
        """
        status = Status.VALID
        if self._unassigned:
            if all(assignment.is_incomplete_name for assignment in self._unassigned):
                status = Status.INCOMPLETE
            else:
                status = Status.ERROR
        status = Status.combine(status, (assignment.get_status() for assignment in self.get_assignments(True)))
        return Status.ERROR if status is Status.INCOMPLETE else status

    def create_execution_context(self, interim=Unset, /):
        return ExecutionContext(self, interim)

    # -- watchers ------------------------------------------------------------

    def watch(self, listener, /):
        if not callable(listener):
            raise TypeError("watch() argument must be callable")
        self._watchers.append(listener)

    def unwatch(self, listener, /):
        try:
            self._watchers.remove(listener)
        except ValueError:
            pass

    def _notify(self, report):
        for listener in list(self._watchers):
            listener(report)

    # -- update --------------------------------------------------------------

    def update(self, typed, /):
        """Re-read the whole line; returns the ChangeReport sent to watchers."""
        self._generation += 1
        plan = self._plan(typed)
        return self._commit(plan, self._resolve(plan))

    async def update_async(self, typed, /):
        """
        Like update(), awaiting types with asynchronous lookups. Returns None,
        without touching the state, when a newer update started meanwhile.
        """
        self._generation += 1
        generation = self._generation
        plan = self._plan(typed)
        conversions = await self._resolve_async(plan)
        if generation != self._generation:
            logging.debug("dropping stale update for %r", typed)
            return None
        return self._commit(plan, conversions)

    def _plan(self, typed):
        if not isinstance(typed, str):
            raise TypeError("update() argument must be a string")
        tokens = tokenize(typed)
        args = list(tokens)
        command = self._split(args)
        steps, unassigned = self._distribute(command.value, args)
        return _Plan(typed, tokens, command, steps, unassigned)

    def _split(self, args):
        """Consume the leading arguments that name the command."""
        command_type = self.command_assignment.param.type
        conversion = Unset
        used = 1
        while used <= len(args):
            arg = args[0] if used == 1 else MergedArgument(args, 0, used)
            try:
                conversion = command_type.parse(arg)
            except Exception as error:
                conversion = _failed(self.command_assignment.param.name, arg, error)
            if conversion.value is Unset or conversion.value.is_executable:
                break
            used += 1
        logging.debug("command %r from %d argument(s)", conversion.arg.text, min(used, len(args)))
        del args[:used]
        return conversion

    def _distribute(self, command, args):
        """
        Decide which argument goes to which parameter.

        Returns ([(param, arg or Unset)] in declaration order, unassigned
        arguments). Unset means the parameter gets its blank conversion.
        """
        if command is Unset:
            return [], list(args)

        params = command.params
        if not args:
            return [(param, Unset) for param in params], []
        if not params:
            return [], list(args)

        if len(params) == 1 and type(params[0].type) is StringType:
            param, = params
            return [(param, args[0] if len(args) == 1 else MergedArgument(args))], []

        plan = {}
        arrays = {}
        unassigned = []
        remaining = list(params)

        for param in params:
            index = 0
            while index < len(args):
                if command.find_parameter(args[index].text) is not param:
                    index += 1
                    continue
                if param in remaining:
                    remaining.remove(param)
                name_arg = args.pop(index)
                if isinstance(param.type, BooleanType):
                    arg = TrueNamedArgument(param.name, name_arg)
                else:
                    arg = NamedArgument(name_arg, args.pop(index) if index < len(args) else Unset)
                if isinstance(param.type, ArrayType):
                    arrays.setdefault(param.name, ArrayArgument()).add_argument(arg)
                else:
                    if param.name in plan:
                        unassigned.extend(_tokens(plan[param.name]))
                    plan[param.name] = arg

        for param in remaining:
            if not param.is_positional_allowed:
                plan[param.name] = Unset
            elif isinstance(param.type, ArrayType):
                arrays.setdefault(param.name, ArrayArgument()).add_arguments(args)
                args.clear()
            elif not args:
                plan[param.name] = Unset
            else:
                arg = args.pop(0)
                if self._is_incomplete_name(param.type, arg.text):
                    unassigned.append(arg)
                    plan[param.name] = Unset
                else:
                    plan[param.name] = arg

        plan.update(arrays)
        unassigned.extend(args)
        logging.debug("assigned %s, %d argument(s) left", sorted(plan), len(unassigned))
        return [(param, plan.get(param.name, Unset)) for param in params], unassigned

    @staticmethod
    def _is_incomplete_name(type, text):
        if isinstance(type, NumberType):
            return re.search(r"-[-a-zA-Z_]", text) is not None
        return text.startswith("-")

    def _resolve(self, plan):
        interim = {}
        context = self.create_execution_context(interim)
        conversions = []
        for param, arg in plan.steps:
            try:
                conversion = param.type.get_blank(context) if arg is Unset else param.type.parse(arg, context)
            except Exception as error:
                conversion = _failed(param.name, coalesce(arg, Argument()), error)
            interim[param.name] = conversion.value
            conversions.append((param.name, conversion))
        return conversions

    async def _resolve_async(self, plan):
        interim = {}
        context = self.create_execution_context(interim)
        conversions = []
        for param, arg in plan.steps:
            try:
                if arg is Unset:
                    conversion = param.type.get_blank(context)
                else:
                    conversion = await param.type.parse_async(arg, context)
            except Exception as error:
                conversion = _failed(param.name, coalesce(arg, Argument()), error)
            interim[param.name] = conversion.value
            conversions.append((param.name, conversion))
        return conversions

    def _commit(self, plan, conversions):
        previous = self.command_assignment.value
        changes = []
        change = self.command_assignment.set_conversion(plan.command)
        if change is not None:
            changes.append(change)

        command = self.command_assignment.value
        command_changed = command is not previous
        if command_changed:
            params = command.params if command is not Unset else []
            self._assignments = {param.name: Assignment(param, index) for index, param in enumerate(params)}

        for name, conversion in conversions:
            change = self._assignments[name].set_conversion(conversion)
            if change is not None:
                changes.append(change)

        self._args = plan.args
        self._unassigned = [UnassignedAssignment(self, arg) for arg in plan.unassigned]

        report = ChangeReport(plan.typed, command_changed, tuple(changes), plan.typed != self._typed)
        self._typed = plan.typed
        self._notify(report)
        return report

    # -- edits ---------------------------------------------------------------

    def _is_untyped(self, assignment):
        return all(token is not assignment.arg for token in self._args) and assignment.arg.is_blank()

    def set_assignment(self, assignment, arg, /):
        """
        Give assignment a new argument, keeping the typed text in step: the
        tokens of the old argument are replaced by those of the new one,
        removed, or (for parameters that had nothing typed) appended.
        """
        if self._is_untyped(assignment) and not self.typed_ends_with_separator():
            arg = arg.beget(prefix_space=True)

        originals = _tokens(assignment.arg)
        replacements = _tokens(arg)
        position = -1
        for index in range(max(len(originals), len(replacements))):
            found = -1
            if index < len(originals):
                found = next((at for at, token in enumerate(self._args) if token is originals[index]), -1)
            if found == -1:
                if index < len(replacements):
                    position = len(self._args) if position == -1 else position + 1
                    self._args.insert(position, replacements[index])
                continue
            if index >= len(replacements):
                del self._args[found]
                position = found - 1
            else:
                self._args[found] = replacements[index]
                position = found

        if assignment is self.command_assignment or isinstance(assignment, UnassignedAssignment):
            return self.update(str(self))

        try:
            conversion = assignment.param.type.parse(arg, self.create_execution_context())
        except Exception as error:
            conversion = _failed(assignment.param.name, arg, error)
        change = assignment.set_conversion(conversion)
        typed = str(self)
        report = ChangeReport(typed, False, () if change is None else (change,), typed != self._typed)
        self._typed = typed
        self._notify(report)
        return report

    def set_blank_arguments(self):
        changes = [change for change in (assignment.set_blank() for assignment in self.get_assignments()) if change]
        report = ChangeReport(str(self), False, tuple(changes), False)
        self._notify(report)
        return report

    def _add_space(self, assignment):
        arg = assignment.arg.beget(suffix_space=True)
        if arg is not assignment.arg:
            return self.set_assignment(assignment, arg)
        return None

    def complete(self, cursor, prediction_choice=0, /):
        """
        TAB: replace the argument at cursor with the chosen prediction and
        move on (a trailing space), or just move on when there is nothing to
        predict and the argument is VALID.
        """
        assignment = self.get_assignment_at(cursor)
        prediction = assignment.get_prediction_at(prediction_choice)

        if prediction is None:
            # inside a name the space goes between the name and its value
            if assignment.is_in_name():
                return self.set_assignment(assignment, assignment.arg.beget(prefix_post_space=True))
            if not assignment.arg.suffix.endswith(" ") and assignment.get_status() is Status.VALID:
                return self._add_space(assignment)
            return None

        arg = assignment.arg.beget(text=prediction.name, dont_quote=assignment is self.command_assignment)
        if not prediction.incomplete:
            arg = arg.beget(suffix_space=True)
        return self.set_assignment(assignment, arg)

    def increment(self, assignment, /):
        return self._step(assignment, assignment.param.type.increment)

    def decrement(self, assignment, /):
        return self._step(assignment, assignment.param.type.decrement)

    def _step(self, assignment, step):
        context = self.create_execution_context()
        replacement = step(assignment.value, context)
        if replacement is Unset:
            return None
        text = assignment.param.type.stringify(replacement, context)
        return self.set_assignment(assignment, assignment.arg.beget(text=text))

    # -- text ----------------------------------------------------------------

    def to_canonical_string(self):
        command = self.command_assignment.value
        line = [command.name if command is not Unset else self.command_assignment.arg.text]
        context = self.create_execution_context()
        for assignment in self.get_assignments():
            if assignment.conversion.is_data_provided() and _differs(assignment.value, assignment.param.default):
                line.append(" " + assignment.param.type.stringify(assignment.value, context))
        return "".join(line)

    def __str__(self):
        return "".join(str(arg) for arg in self._args)

    def typed_ends_with_separator(self):
        if not self._args:
            return False
        last = self._args[-1]
        if last.suffix.endswith(" "):
            return True
        return last.text == "" and last.suffix == "" and last.prefix.endswith(" ")

    def create_input_arg_trace(self):
        traces = []
        for arg in self._args:
            for part, chars in ((Part.PREFIX, arg.prefix), (Part.TEXT, arg.text), (Part.SUFFIX, arg.suffix)):
                traces.extend(ArgTrace(arg, char, part) for char in chars)
        return traces

    def get_input_status_markup(self, cursor, /):
        """
        Status of every typed character, as runs of equal status.

        cursor: position of the caret; INCOMPLETE characters away from it
        are reported as ERROR.
        """
        traces = self.create_input_arg_trace()
        if not traces:
            return []

        current = traces[max(0, min(cursor - 1 if cursor else 0, len(traces) - 1))]
        current_assignment = current.arg.assignment
        is_named = current_assignment is not None and current_assignment.arg.kind is ArgumentKind.NAMED
        inside = current.part is Part.TEXT or (is_named and current.part is Part.SUFFIX)

        markup = []
        for trace in traces:
            status = Status.VALID
            if trace.part is Part.TEXT:
                assignment = trace.arg.assignment
                status = Status.ERROR if assignment is None else assignment.get_status(trace.arg)
                if status is Status.INCOMPLETE and assignment is not self.command_assignment:
                    if assignment is not current_assignment or not inside:
                        status = Status.ERROR
            if markup and markup[-1].status is status:
                markup[-1] = StatusMarkup(status, markup[-1].string + trace.char)
            else:
                markup.append(StatusMarkup(status, trace.char))
        return markup

    def get_assignment_at(self, cursor, /):
        """The assignment the character before cursor belongs to."""
        if cursor <= 0:
            return self.command_assignment

        positions = []
        for index, arg in enumerate(self._args):
            assignment = arg.assignment
            positions.extend([assignment] * (len(arg.prefix) + len(arg.text)))

            if assignment is not None and assignment.arg.kind is ArgumentKind.NAMED:
                pass
            elif index + 1 < len(self._args):
                assignment = self._args[index + 1].assignment
            else:
                for candidate in self.get_assignments():
                    if self._is_untyped(candidate) and candidate.param.is_positional_allowed:
                        assignment = candidate
                        break
            positions.extend([assignment] * len(arg.suffix))

        if not positions:
            return self.command_assignment
        return positions[min(cursor, len(positions)) - 1] or self.command_assignment

    def __rich__(self):
        text = Text()
        for markup in self.get_input_status_markup(len(str(self))):
            text.append(markup.string, style=_STATUS_STYLES[markup.status])
        return text

    # -- execution -----------------------------------------------------------

    def _begin(self, command, args, hidden):
        if command is Unset:
            command = self.command_assignment.value
            args = self.get_args_object() if args is Unset else dict(args)
            canonical = self.to_canonical_string()
        else:
            if isinstance(command, str):
                command = self.canon.get_command(command) or command
            args = dict(coalesce(args, {}))
            canonical = Unset

        if command is Unset and not self.command_assignment.arg.text:
            self.system.trigger(MissingCommandError(
                "there is nothing to run",
                title="missing command",
                code=FaultCode.MISSING_COMMAND,
                hint="type a command before running the line",
                docs=getdoc(FaultCode.MISSING_COMMAND)
            ))

        if isinstance(command, str) or command is Unset or not command.is_executable:
            name = command if isinstance(command, str) else getattr(command, "name", self.command_assignment.arg.text)
            suggestions = suggest(name, [
                candidate.name for candidate in self.canon.get_commands() if candidate.is_executable
            ])
            self.system.trigger(UnknownCommandError(
                "there is no command %r to run" % name,
                title="unknown command",
                code=FaultCode.UNKNOWN_COMMAND,
                hint="did you mean %r?" % suggestions[0] if suggestions else "type a registered command",
                suggestions=suggestions,
                docs=getdoc(FaultCode.UNKNOWN_COMMAND)
            ))

        args = {parameter.name: parameter.default for parameter in command.params} | args
        if canonical is Unset:
            context = self.create_execution_context()
            canonical = " ".join([command.name] + [
                parameter.type.stringify(args[parameter.name], context)
                for parameter in command.params
                if _differs(args[parameter.name], parameter.default)
            ])

        output = Output(command, args, typed=str(self), canonical=canonical, hidden=hidden)
        self.system.outputs.append(output)
        return output, command, args

    def exec(self, typed=Unset, /, *, command=Unset, args=Unset, hidden=False):
        """
        Run the current line (after update(typed) when typed is given), or
        the given command with the given args, and reset the line.

        Returns the Output; for commands answering with an awaitable or a
        Deferred it completes later.
        """
        if typed is not Unset:
            self.update(typed)
        output, command, args = self._begin(command, args, hidden)

        try:
            reply = command.invoke(args, self.create_execution_context())
        except Exception as error:
            logging.info("command %r failed", command.name, exc_info=True)
            output.complete(error, error=True)
        else:
            if isinstance(reply, Deferred):
                output.future = reply
                reply.add_done_callback(lambda deferred: settle(output, deferred))
            elif inspect.isawaitable(reply):
                try:
                    loop = asyncio.get_running_loop()
                except RuntimeError:
                    loop = None
                if loop is not None:
                    output.future = asyncio.ensure_future(reply)
                    output.future.add_done_callback(lambda future: settle(output, future))
                else:
                    try:
                        output.complete(asyncio.run(_wait(reply)))
                    except Exception as error:
                        logging.info("command %r failed", command.name, exc_info=True)
                        output.complete(error, error=True)
            else:
                output.complete(reply)

        self.update("")
        return output

    async def exec_async(self, typed=Unset, /, *, command=Unset, args=Unset, hidden=False):
        """exec() for event loops: awaits the command's answer before returning."""
        if typed is not Unset:
            await self.update_async(typed)
        output, command, args = self._begin(command, args, hidden)

        try:
            reply = command.invoke(args, self.create_execution_context())
            if inspect.isawaitable(reply):
                output.future = reply
                reply = await reply
        except Exception as error:
            logging.info("command %r failed", command.name, exc_info=True)
            output.complete(error, error=True)
        else:
            output.complete(reply)

        self.update("")
        return output

    def __repr__(self):
        return f"Requisition({str(self)!r}, status={self.get_status().name})"


async def _wait(awaitable):
    return await awaitable


__all__ = (
    "Part",
    "ArgTrace",
    "StatusMarkup",
    "AssignmentChange",
    "ChangeReport",
    "Assignment",
    "CommandAssignment",
    "UnassignedType",
    "UnassignedAssignment",
    "Requisition",
)
