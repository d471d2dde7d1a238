import logging as logmod
import sys

from rich.console import Console
from rich.pretty import pprint

from gcli import *

logmod.basicConfig(level=logmod.INFO, format="%(levelname)s %(name)s: %(message)s")

console = Console()
system = create_system(prog="demo", shell=True)


@system.canon.command(params=[
    {"name": "who", "type": "string"},
    {"name": "times", "type": {"name": "number", "min": 1, "max": 5}, "default": 1},
    {"group": "Style", "params": [
        {"name": "shout", "type": "boolean", "short": "s"},
    ]},
])
def greet(args, context):
    """Say hello."""
    text = " ".join(["hello " + args["who"]] * args["times"])
    return text.upper() if args["shout"] else text


@system.canon.command(params=[
    {"name": "color", "type": {"name": "selection", "data": ["red", "green", "blue"]}},
])
def paint(args, context):
    """Pick a color."""
    return "painted " + args["color"]


if __name__ == '__main__':
    requisition = system.requisition()
    for typed in sys.argv[1:] or ["greet world --times 2 -s", "paint gr", "pain green"]:
        requisition.update(typed)
        console.print(requisition)
        pprint([(assignment.param.name, assignment.value, assignment.get_status().name)
                for assignment in requisition.get_assignments(True)])
        if requisition.get_status() is Status.VALID:
            console.print(requisition.exec())
