"""
Utilities behavioral tests (sentinel, coalescing, mirrors, wording helpers).

Conventions
- Test method names follow CamelCase per project convention.
"""

import unittest
from unittest import TestCase

from clide.utils import Unset, UnsetType, coalesce, mirror, ordinal, pluralize


class TestUnset(TestCase):
    def testUnsetIsFalsySingleton(self):
        self.assertFalse(Unset)
        self.assertIs(UnsetType(), Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnsetCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):  # NOQA: F-841
                pass

    def testUnsetSupportsUnions(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertNotIsInstance(1, str | Unset)

    def testCoalesceOnlyReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIs(coalesce(False, "fallback"), False)
        self.assertEqual(coalesce(0, 5), 0)
        self.assertIsNone(coalesce(Unset))


class TestMirror(TestCase):
    def testMirrorReturnsCopies(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = {"a": [1, 2]}

        holder = Holder()
        holder.items["a"].append(3)
        holder.items["b"] = []
        self.assertEqual(holder.items, {"a": [1, 2]})

    def testMirrorIsReadOnly(self):
        class Holder:
            value = mirror("value")

            def __init__(self):
                self._value = Unset

        holder = Holder()
        self.assertIsNone(holder.value)
        with self.assertRaises(AttributeError):
            holder.value = 1

    def testMirrorRejectsNonString(self):
        with self.assertRaises(TypeError):
            mirror(1)


class TestWording(TestCase):
    def testOrdinalWords(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(12), "twelfth")
        self.assertEqual(ordinal(20), "twentieth")
        self.assertEqual(ordinal(22), "twenty-second")
        self.assertEqual(ordinal(99), "ninety-ninth")

    def testOrdinalSuffixesFromOneHundred(self):
        self.assertEqual(ordinal(101), "101st")
        self.assertEqual(ordinal(112), "112th")
        self.assertEqual(ordinal(123), "123rd")

    def testOrdinalRejectsNegative(self):
        with self.assertRaises(TypeError):
            ordinal(-1)

    def testPluralize(self):
        self.assertEqual(pluralize("option"), "options")
        self.assertEqual(pluralize("missing switch"), "missing switches")
        self.assertEqual(pluralize("Entry"), "Entries")
        self.assertEqual(pluralize("KEY"), "KEYS")


if __name__ == "__main__":
    unittest.main()
