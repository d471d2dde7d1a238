"""
Tests for the Unset sentinel and the small helpers in gcli.utils.

This module verifies:
- Singleton identity, falsy semantics and representation of Unset.
- Copying, deep copying, pickling and thread safety of the sentinel.
- coalesce(), rename(), mirror() and ordinal().
"""
import copy
import pickle
import unittest
from threading import Thread, Lock
from unittest import TestCase

from rich.console import Console

from gcli.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` singleton.

    This suite asserts that:
    - UnsetType() always returns the same instance.
    - The sentinel is falsy but not equal to None or False.
    - Copy/deepcopy/pickle round-trips preserve identity.
    - The type is final and cannot be subclassed.
    """

    def setUp(self) -> None:
        self.unset: UnsetType = UnsetType()

    def testSingleton(self) -> None:
        """
        The constructor and the exported constant are the same object.
        """
        self.assertIs(self.unset, UnsetType())
        self.assertIs(self.unset, Unset)

    def testHashAndSetUniqueness(self) -> None:
        self.assertEqual(len({self.unset, UnsetType()}), 1)

    def testRepr(self) -> None:
        self.assertEqual(repr(self.unset), "Unset")
        self.assertEqual(str(self.unset), "Unset")

    def testRichConsolePrint(self) -> None:
        """
        Console.print(...) renders 'Unset' without ANSI when color is disabled.
        """
        console = Console(color_system=None, force_terminal=False)
        with console.capture() as capture:
            console.print(self.unset)
        self.assertEqual(capture.get().strip(), "Unset")

    def testFalsy(self) -> None:
        self.assertFalse(bool(self.unset))

    def testNotEqualToNoneOrFalse(self) -> None:
        """
        Falsy does not imply equality with other falsy values (None/False).
        """
        self.assertNotEqual(self.unset, None)
        self.assertNotEqual(self.unset, False)  # noqa: E712

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        self.assertIs(copy.copy(self.unset), self.unset)
        self.assertIs(copy.deepcopy(self.unset), self.unset)
        self.assertIs(copy.deepcopy([self.unset])[0], self.unset)

    def testPickleRoundTrip(self) -> None:
        self.assertIs(pickle.loads(pickle.dumps(self.unset)), self.unset)

    def testThreadSafetySingleton(self) -> None:
        """
        Concurrent constructions return the same instance.
        """
        results: list[UnsetType] = []
        lock: Lock = Lock()

        def worker():
            instance = UnsetType()
            with lock:
                results.append(instance)

        threads: list[Thread] = [Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertTrue(results)
        for instance in results:
            self.assertIs(instance, self.unset)

    def testUnionAnnotations(self) -> None:
        self.assertEqual(str | Unset, str | UnsetType)

    def testFinalClass(self) -> None:
        """
        The class is final: attempts to subclass must fail with TypeError.
        """
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class HelpersTest(TestCase):
    """coalesce, rename, mirror and ordinal."""

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 5), 0)
        self.assertEqual(coalesce("", "x"), "")

    def testRename(self) -> None:
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

        @rename("decorated")
        def other():
            pass

        self.assertEqual(other.__name__, "decorated")

    def testRenameRejects(self) -> None:
        with self.assertRaises(TypeError):
            rename(42, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 42)
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename("name")(42)

    def testMirror(self) -> None:
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = [1, [2]]

        holder = Holder()
        items = holder.items
        items.append(3)
        items[1].append(4)
        self.assertEqual(holder.items, [1, [2]])
        with self.assertRaises(AttributeError):
            holder.items = []
        with self.assertRaises(TypeError):
            mirror(42)

    def testOrdinal(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(102), "102nd")
        self.assertEqual(ordinal(113), "113th")
        with self.assertRaises(TypeError):
            ordinal("3")


if __name__ == '__main__':
    unittest.main()
