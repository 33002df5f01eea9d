"""
Utils module behavioral tests (sentinel, helpers, read-only mirrors).

Scope
- Validate the Unset sentinel semantics and coalesce().
- Validate rename() in both call forms.
- Validate mirror() freezing of container fields.
- Validate pluralize() on the phrases used by fault messages.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from types import MappingProxyType
from unittest import TestCase

from argosy.utils import Unset, UnsetType, coalesce, rename, mirror, pluralize


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsey(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnionWithTypes(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("x", str | Unset)
        self.assertNotIsInstance(1, str | Unset)

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertEqual(coalesce("name", "fallback"), "name")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(Unset))


class TestRename(TestCase):
    """Behavioral tests for rename()."""

    def testDirectForm(self):
        def function(): ...
        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testDecoratorForm(self):
        @rename("renamed")
        def function(): ...
        self.assertEqual(function.__name__, "renamed")

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename(1, "x")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename()


class TestMirror(TestCase):
    """Behavioral tests for mirror()."""

    class Holder:
        items = mirror("items")
        table = mirror("table")
        tags = mirror("tags")
        label = mirror("label")

        def __init__(self):
            self._items = [1, [2, 3]]
            self._table = {"a": [1]}
            self._tags = {"x"}
            self._label = "text"

    def testContainersAreFrozen(self):
        holder = self.Holder()
        self.assertEqual(holder.items, (1, (2, 3)))
        self.assertIsInstance(holder.table, MappingProxyType)
        self.assertEqual(holder.table["a"], (1,))
        self.assertEqual(holder.tags, frozenset({"x"}))
        self.assertEqual(holder.label, "text")

    def testIsReadOnly(self):
        holder = self.Holder()
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            mirror(1)


class TestPluralize(TestCase):
    """Behavioral tests for pluralize()."""

    def testPhrases(self):
        self.assertEqual(pluralize("option"), "options")
        self.assertEqual(pluralize("required option"), "required options")
        self.assertEqual(pluralize("entry"), "entries")
        self.assertEqual(pluralize("Switch"), "Switches")
        self.assertEqual(pluralize("ARG"), "ARGS")

    def testEmpty(self):
        self.assertEqual(pluralize(""), "")

    def testRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            pluralize(1)


if __name__ == "__main__":
    unittest.main()
