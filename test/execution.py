"""
Execution tests (running the typed line and recording what happened).

Scope
- Validate Output records, Deferred results and the execution context.
- Validate exec(): typed lines, explicit command/args, defaults, failures.
- Validate faults for lines that can't be run.
- Validate asynchronous answers when no event loop is running.

Conventions
- Test method names follow CamelCase per project convention.
- Commands come from fixtures.create(); each test gets its own system.
"""

from __future__ import annotations

import unittest
from datetime import timedelta
from unittest import TestCase

from gcli import (
    Deferred,
    ExecutionContext,
    MissingCommandError,
    Output,
    UnknownCommandError,
    Unset,
    create_system,
    settle,
)

import fixtures


class TestOutput(TestCase):
    """A single run record."""

    def testComplete(self):
        output = Output("cmd", {"a": 1}, typed="cmd 1")
        self.assertFalse(output.completed)
        self.assertIs(output.duration, Unset)
        output.complete("done")
        self.assertTrue(output.completed)
        self.assertFalse(output.error)
        self.assertEqual(output.data, "done")
        self.assertIsInstance(output.duration, timedelta)
        self.assertEqual(str(output), "done")

    def testArgsAreCopied(self):
        args = {"a": 1}
        output = Output("cmd", args)
        args["a"] = 2
        self.assertEqual(output.args, {"a": 1})

    def testEmptyData(self):
        output = Output("cmd", {})
        self.assertEqual(str(output), "")
        output.complete(None)
        self.assertEqual(str(output), "")

    def testRich(self):
        output = Output("cmd", {}, typed="cmd")
        output.complete(ValueError("bad"), error=True)
        self.assertEqual(output.__rich__().border_style, "red")


class TestDeferred(TestCase):
    """Results that arrive later."""

    def testResolve(self):
        deferred = Deferred()
        seen = []
        deferred.add_done_callback(seen.append)
        self.assertFalse(deferred.done())
        deferred.resolve(5)
        self.assertTrue(deferred.done())
        self.assertEqual(deferred.result(), 5)
        self.assertEqual(seen, [deferred])

    def testReject(self):
        deferred = Deferred()
        deferred.reject(KeyError("k"))
        self.assertIsInstance(deferred.exception(), KeyError)

    def testRejectNeedsAnException(self):
        with self.assertRaises(TypeError):
            Deferred().reject("nope")

    def testSettle(self):
        output = Output("cmd", {})
        deferred = Deferred()
        deferred.resolve("ok")
        settle(output, deferred)
        self.assertEqual(output.data, "ok")

        output = Output("cmd", {})
        deferred = Deferred()
        deferred.reject(ValueError("bad"))
        settle(output, deferred)
        self.assertTrue(output.error)
        self.assertIsInstance(output.data, ValueError)


class TestExecutionContext(TestCase):
    """What commands and types can reach."""

    def setUp(self):
        self.system, _ = fixtures.create(environment={"user": "me"}, document="doc")
        self.requisition = self.system.requisition()

    def testHostObjects(self):
        context = self.requisition.create_execution_context()
        self.assertIsInstance(context, ExecutionContext)
        self.assertIs(context.requisition, self.requisition)
        self.assertIs(context.system, self.system)
        self.assertEqual(context.environment, {"user": "me"})
        self.assertEqual(context.document, "doc")

    def testRequisitionOverridesHostObjects(self):
        requisition = self.system.requisition(document="other")
        self.assertEqual(requisition.document, "other")
        self.assertEqual(requisition.environment, {"user": "me"})

    def testValueOf(self):
        self.requisition.update("tsm b hi 3")
        context = self.requisition.create_execution_context()
        self.assertEqual(context.value_of("abc"), "b")
        self.assertEqual(context.value_of("num"), 3)
        self.assertIs(context.value_of("missing"), Unset)

    def testInterimValuesWin(self):
        self.requisition.update("tsm b")
        context = self.requisition.create_execution_context({"abc": "c"})
        self.assertEqual(context.value_of("abc"), "c")

    def testUpdateAndDefer(self):
        context = self.requisition.create_execution_context()
        context.update("tsr x")
        self.assertEqual(str(self.requisition), "tsr x")
        self.assertIsInstance(context.defer(), Deferred)


class TestExec(TestCase):
    """Running lines."""

    def setUp(self):
        self.system, self.calls = fixtures.create()
        self.requisition = self.system.requisition()

    def testTypedLine(self):
        output = self.requisition.exec("tsr hello")
        self.assertEqual(self.calls, [("tsr", {"text": "hello"})])
        self.assertEqual(output.data, "tsr")
        self.assertTrue(output.completed)
        self.assertEqual(output.typed, "tsr hello")
        self.assertEqual(output.canonical, "tsr hello")
        self.assertIs(output.command, self.system.canon.get_command("tsr"))

    def testLineIsResetAfterwards(self):
        self.requisition.exec("tsr hello")
        self.assertEqual(str(self.requisition), "")
        self.assertIs(self.requisition.command_assignment.value, Unset)

    def testCurrentLine(self):
        self.requisition.update("tsu 3")
        output = self.requisition.exec()
        self.assertEqual(output.args, {"num": 3})

    def testDefaultsFillTheGaps(self):
        self.requisition.exec("tsg aaa")
        self.assertEqual(self.calls, [("tsg", {"solo": "aaa", "txt1": None, "bool": False, "txt2": "d", "num": 42})])

    def testNamedArguments(self):
        output = self.requisition.exec("tsg bbb --txt2 x --bool")
        self.assertEqual(output.args["txt2"], "x")
        self.assertIs(output.args["bool"], True)
        self.assertEqual(output.canonical, "tsg bbb true x")

    def testMultiWordCommand(self):
        output = self.requisition.exec("tsn deep down nested cmd")
        self.assertEqual(output.data, "tsn deep down nested cmd")

    def testExplicitCommand(self):
        output = self.requisition.exec(command="tsg", args={"solo": "ccc", "num": 50})
        self.assertEqual(self.calls[-1], ("tsg", {"solo": "ccc", "txt1": None, "bool": False, "txt2": "d", "num": 50}))
        self.assertEqual(output.canonical, "tsg ccc 50")
        self.assertEqual(output.typed, "")

    def testExplicitCommandObject(self):
        tss = self.system.canon.get_command("tss")
        self.assertEqual(self.requisition.exec(command=tss).data, "tss")

    def testFailingCommand(self):
        def fail(args, context):
            raise ValueError("broken")

        self.system.canon.add_command(name="fail", exec=fail)
        with self.assertLogs("gcli.requisition", level="INFO"):
            output = self.requisition.exec("fail")
        self.assertTrue(output.error)
        self.assertIsInstance(output.data, ValueError)
        self.requisition.update("tsr ok")
        self.assertEqual(self.requisition.get_assignment("text").value, "ok")

    def testUnknownCommand(self):
        with self.assertRaises(UnknownCommandError) as context:
            self.requisition.exec("tvs")
        self.assertIn("tsv", context.exception.options["suggestions"])
        with self.assertRaises(UnknownCommandError):
            self.requisition.exec(command="nope")
        self.assertEqual(self.calls, [])

    def testGroupsCantRun(self):
        with self.assertRaises(UnknownCommandError):
            self.requisition.exec("tsn")

    def testNothingToRun(self):
        with self.assertRaises(MissingCommandError):
            self.requisition.exec("")

    def testInvalidLinesStillRun(self):
        output = self.requisition.exec("tsu 99")
        self.assertTrue(output.completed)
        self.assertEqual(self.calls, [("tsu", {"num": Unset})])

    def testOutputsAreRecorded(self):
        seen = []
        self.system.outputs.watch(seen.append)
        output = self.requisition.exec("tss")
        self.assertEqual(list(self.system.outputs), [output])
        self.assertEqual(seen, [output, output])

    def testHiddenOutputs(self):
        seen = []
        self.system.outputs.watch(seen.append)
        output = self.requisition.exec("tss", hidden=True)
        self.assertTrue(output.hidden)
        self.assertEqual(seen, [])
        self.assertEqual(len(self.system.outputs), 1)

    def testFromContext(self):
        def outer(args, context):
            return context.exec(command="tsr", args={"text": "inner"}).data

        self.system.canon.add_command(name="outer", exec=outer)
        self.assertEqual(self.requisition.exec("outer").data, "tsr")
        self.assertEqual(self.calls, [("tsr", {"text": "inner"})])


class TestLaterAnswers(TestCase):
    """Commands answering with a Deferred or an awaitable."""

    def setUp(self):
        self.system = create_system()
        self.requisition = self.system.requisition()
        self.pending = []

    def testDeferred(self):
        def later(args, context):
            deferred = context.defer()
            self.pending.append(deferred)
            return deferred

        self.system.canon.add_command(name="later", exec=later)
        output = self.requisition.exec("later")
        self.assertFalse(output.completed)
        self.assertIs(output.future, self.pending[0])
        self.pending[0].resolve("finally")
        self.assertTrue(output.completed)
        self.assertEqual(output.data, "finally")

    def testRejectedDeferred(self):
        def later(args, context):
            deferred = context.defer()
            self.pending.append(deferred)
            return deferred

        self.system.canon.add_command(name="later", exec=later)
        output = self.requisition.exec("later")
        self.pending[0].reject(RuntimeError("gone"))
        self.assertTrue(output.error)
        self.assertIsInstance(output.data, RuntimeError)

    def testCoroutineWithoutLoop(self):
        async def answer(args, context):
            return args["n"] * 2

        self.system.canon.add_command(name="double", params=[{"name": "n", "type": "number"}], exec=answer)
        output = self.requisition.exec("double 21")
        self.assertTrue(output.completed)
        self.assertEqual(output.data, 42)

    def testFailingCoroutineWithoutLoop(self):
        async def answer(args, context):
            raise LookupError("nothing")

        self.system.canon.add_command(name="nothing", exec=answer)
        output = self.requisition.exec("nothing")
        self.assertTrue(output.error)
        self.assertIsInstance(output.data, LookupError)


if __name__ == "__main__":
    unittest.main()
