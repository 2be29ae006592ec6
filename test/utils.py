"""
Utils module behavioral tests (sentinel, renaming, mirrors, keys, module globs).

Scope
- Validate Unset/coalesce semantics.
- Validate rename() forms and errors.
- Validate mirror() read-only frozen views.
- Validate casekey() folding and mglob() expansion.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from syntaxer.utils import Unset, UnsetType, casekey, coalesce, mglob, mirror, rename


class TestUnset(TestCase):

    def testSingletonAndFalsey(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Other", (UnsetType,), {})

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "x"), "x")
        self.assertEqual(coalesce("Path", "x"), "Path")
        self.assertIsNone(coalesce(None, "x"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(Unset))


class TestRename(TestCase):

    def testDirectForm(self):
        renamed = rename(lambda: None, "probe")
        self.assertEqual(renamed.__name__, "probe")
        self.assertEqual(renamed.__qualname__, "probe")

    def testDecoratorForm(self):
        @rename("probe")
        def function():
            pass

        self.assertEqual(function.__name__, "probe")

    def testErrors(self):
        with self.assertRaises(TypeError):
            rename(1, "probe")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename("probe")(1)


class TestMirror(TestCase):

    class Holder:
        items = mirror("items")
        table = mirror("table")
        value = mirror("value")

        def __init__(self):
            self._items = ["a", "b"]
            self._table = {"a": 1}
            self._value = "text"

    def testFrozenViews(self):
        holder = self.Holder()
        self.assertEqual(holder.items, ("a", "b"))
        self.assertEqual(holder.value, "text")
        with self.assertRaises(TypeError):
            holder.table["b"] = 2  # type: ignore[index]

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            self.Holder().items = ()

    def testNameMustBeAString(self):
        with self.assertRaises(TypeError):
            mirror(1)  # type: ignore[arg-type]


class TestCasekey(TestCase):

    def testFolding(self):
        self.assertEqual(casekey(True)("Path"), casekey(True)("PATH"))
        self.assertEqual(casekey()("Straße"), casekey()("STRASSE"))

    def testIdentity(self):
        self.assertEqual(casekey(False)("Path"), "Path")
        self.assertNotEqual(casekey(False)("Path"), casekey(False)("path"))

    def testCached(self):
        self.assertIs(casekey(True), casekey(True))


class TestMglob(TestCase):

    def testConcreteNameIsReturnedAsIs(self):
        self.assertEqual(mglob("json"), ["json"])
        self.assertEqual(mglob("  json.decoder "), ["json.decoder"])

    def testChildren(self):
        modules = mglob("json.*")
        self.assertIn("json.decoder", modules)
        self.assertNotIn("json", modules)
        self.assertEqual(modules, sorted(modules))

    def testCharacterClass(self):
        self.assertEqual(mglob("json.[de]*coder"), ["json.decoder", "json.encoder"])

    def testUnimportablePrefix(self):
        self.assertEqual(mglob("syntaxer_no_such_package.*"), [])

    def testErrors(self):
        with self.assertRaises(TypeError):
            mglob(1)  # type: ignore[arg-type]
        with self.assertRaises(ValueError):
            mglob("   ")
        with self.assertRaises(ValueError):
            mglob("*.tools")


if __name__ == "__main__":
    unittest.main()
