"""
Shared test commands.

Scope
- create() builds a fresh System with the test commands registered and a
  list collecting every exec call, so suites never share state.

Commands
- tsv: a selection (optionType) whose value decides the type of the next
  parameter (optionValue, a delegate).
- tsr: one string parameter; tsb: one boolean; tss: no parameters.
- tsu: a bounded number with a step of 3.
- tsn: a group with sub-commands, down to 'tsn deep down nested cmd'.
- tselarr: a selection followed by a string array.
- tsm: selection, string and number.
- tsg: a positional selection and two parameter groups.

add_fragile() adds commands whose types raise: tsf (a "fragile" word that
fails on "bad", then a number) and tsx (a delegate that can never pick a type).
"""

from __future__ import annotations

from gcli import Conversion, Type, Unset, create_system

OPTION1 = {"type": "number"}
OPTION2 = {"type": "boolean"}


def option_value_type(context):
    option = context.value_of("optionType") if context else None
    if option:
        return option["type"]
    return "blank"


def create(**options):
    system = create_system(**options)
    calls = []

    def recorder(name):
        def exec(args, context):
            calls.append((name, dict(args)))
            return name

        return exec

    canon = system.canon
    canon.add_command(
        name="tsv",
        params=[
            {"name": "optionType", "type": {"name": "selection", "data": [
                {"name": "option1", "value": OPTION1},
                {"name": "option2", "value": OPTION2},
            ]}},
            {"name": "optionValue", "type": {"name": "delegate", "delegate_type": option_value_type}},
        ],
        exec=recorder("tsv"),
    )
    canon.add_command(name="tsr", params=[{"name": "text", "type": "string"}], exec=recorder("tsr"))
    canon.add_command(name="tsb", params=[{"name": "toggle", "type": "boolean"}], exec=recorder("tsb"))
    canon.add_command(name="tss", exec=recorder("tss"))
    canon.add_command(
        name="tsu",
        params=[{"name": "num", "type": {"name": "number", "max": 10, "min": -5, "step": 3}}],
        exec=recorder("tsu"),
    )
    canon.add_command(name="tsn")
    canon.add_command(name="tsn dif", params=[{"name": "text", "type": "string"}], exec=recorder("tsn dif"))
    canon.add_command(name="tsn ext", params=[{"name": "text", "type": "string"}], exec=recorder("tsn ext"))
    canon.add_command(name="tsn exte", params=[{"name": "text", "type": "string"}], exec=recorder("tsn exte"))
    canon.add_command(name="tsn exten", params=[{"name": "text", "type": "string"}], exec=recorder("tsn exten"))
    canon.add_command(name="tsn extend", params=[{"name": "text", "type": "string"}], exec=recorder("tsn extend"))
    canon.add_command(name="tsn deep")
    canon.add_command(name="tsn deep down")
    canon.add_command(name="tsn deep down nested")
    canon.add_command(name="tsn deep down nested cmd", exec=recorder("tsn deep down nested cmd"))
    canon.add_command(
        name="tselarr",
        params=[
            {"name": "num", "type": {"name": "selection", "data": ["1", "2", "3"]}},
            {"name": "arr", "type": {"name": "array", "subtype": "string"}},
        ],
        exec=recorder("tselarr"),
    )
    canon.add_command(
        name="tsm",
        description="a 3-param test selection|string|number",
        params=[
            {"name": "abc", "type": {"name": "selection", "data": ["a", "b", "c"]}},
            {"name": "txt", "type": "string"},
            {"name": "num", "type": {"name": "number", "max": 42, "min": 0}},
        ],
        exec=recorder("tsm"),
    )
    canon.add_command(
        name="tsg",
        description="a param group test",
        params=[
            {"name": "solo", "type": {"name": "selection", "data": ["aaa", "bbb", "ccc"]}},
            {"group": "First", "params": [
                {"name": "txt1", "type": "string", "default": None},
                {"name": "bool", "type": "boolean"},
            ]},
            {"group": "Second", "params": [
                {"name": "txt2", "type": "string", "default": "d"},
                {"name": "num", "type": {"name": "number", "min": 40}, "default": 42},
            ]},
        ],
        exec=recorder("tsg"),
    )
    return system, calls


class FragileType(Type):
    name = "fragile"

    def parse(self, arg, context=Unset, /):
        if arg.text == "bad":
            raise RuntimeError("lookup exploded")
        return Conversion(arg.text, arg)


def missing_type(context):
    raise KeyError("no type for this value")


def add_fragile(system):
    system.types.register(FragileType)
    system.canon.add_command(
        name="tsf",
        params=[{"name": "word", "type": "fragile"}, {"name": "num", "type": "number"}],
        exec=lambda args, context: args["word"],
    )
    system.canon.add_command(
        name="tsx",
        params=[{"name": "value", "type": {"name": "delegate", "delegate_type": missing_type}}],
        exec=lambda args, context: args["value"],
    )


def statuses(requisition, cursor=None):
    """Markup as one letter per character: V(alid), I(ncomplete), E(rror)."""
    typed = str(requisition)
    markup = requisition.get_input_status_markup(len(typed) if cursor is None else cursor)
    return "".join(entry.status.name[0] * len(entry.string) for entry in markup)
