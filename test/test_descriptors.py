"""
Parameter descriptor behavioral tests.

Scope
- Construction, normalization and validation of metadata.
- Toggle and empty capability flags.
- Display serialization of scalar and vector values.

Conventions
- Test method names follow CamelCase per project convention.
"""
import json
import unittest
from unittest import TestCase

from cliogram import Category, Parameter


class ParameterTest(TestCase):
    def testDefaults(self):
        parameter = Parameter("outputPath")
        self.assertEqual(parameter.name, "outputPath")
        self.assertEqual(parameter.type, "text")
        self.assertIs(parameter.element, Category.OPTION)
        self.assertTrue(parameter.required)
        self.assertFalse(parameter.vector)
        self.assertFalse(parameter.hidden)
        self.assertIsNone(parameter.short)
        self.assertIsNone(parameter.descr)
        self.assertIsNone(parameter.value)

    def testElementAcceptsPlainStrings(self):
        self.assertIs(Parameter("source", element="argument").element, Category.ARGUMENT)

    def testNameMustBeIdentifier(self):
        with self.assertRaises(ValueError):
            Parameter("1st")
        with self.assertRaises(ValueError):
            Parameter("output-path")
        with self.assertRaises(TypeError):
            Parameter(3)

    def testTypeCannotBeEmpty(self):
        with self.assertRaises(ValueError):
            Parameter("name", "  ")

    def testUnknownElementRejected(self):
        with self.assertRaises(ValueError):
            Parameter("name", element="flag")

    def testShortMustBeSingleCharacter(self):
        self.assertEqual(Parameter("verbose", short="v").short, "v")
        with self.assertRaises(ValueError):
            Parameter("verbose", short="vv")
        with self.assertRaises(ValueError):
            Parameter("verbose", short="-")

    def testShortRejectedOnArguments(self):
        with self.assertRaises(TypeError):
            Parameter("source", element=Category.ARGUMENT, short="s")

    def testDescrCannotBeBlank(self):
        with self.assertRaises(ValueError):
            Parameter("name", descr="   ")
        self.assertEqual(Parameter("name", descr=" Name ").descr, "Name")

    def testSerializerMustBeCallable(self):
        with self.assertRaises(TypeError):
            Parameter("name", serializer="str")

    def testVectorValueMustBeList(self):
        with self.assertRaises(TypeError):
            Parameter("tags", vector=True, value="a")
        parameter = Parameter("tags", vector=True, value=("a", "b"))
        self.assertEqual(parameter.value, ["a", "b"])

    def testValueIsReassignable(self):
        parameter = Parameter("force", "bool", value=True)
        parameter.value = False
        self.assertFalse(parameter.value)

    def testVectorValueIsCopied(self):
        parameter = Parameter("tags", vector=True, value=["a"])
        parameter.value.append("b")
        self.assertEqual(parameter.value, ["a"])

    def testRepr(self):
        self.assertTrue(repr(Parameter("name")).startswith("parameter(name='name', type='text'"))


class CapabilityTest(TestCase):
    def testToggleOnlyForBooleanScalars(self):
        self.assertTrue(Parameter("verbose", "bool").toggle)
        self.assertTrue(Parameter("verbose", "boolean").toggle)
        self.assertFalse(Parameter("verbose", "bool", vector=True).toggle)
        self.assertFalse(Parameter("verbose", "text").toggle)

    def testEmpty(self):
        self.assertTrue(Parameter("name").empty)
        self.assertFalse(Parameter("name", value="x").empty)
        self.assertFalse(Parameter("force", "bool", value=False).empty)
        self.assertTrue(Parameter("tags", vector=True, value=[]).empty)
        self.assertFalse(Parameter("tags", vector=True, value=["a"]).empty)


class SerializeTest(TestCase):
    def testEmptySerializesToNone(self):
        self.assertIsNone(Parameter("name").serialize())

    def testScalar(self):
        self.assertEqual(Parameter("retries", "numeric", value=3).serialize(), "3")
        self.assertEqual(Parameter("force", "bool", value=True).serialize(), "1")

    def testVectorIsJsonArray(self):
        serialized = Parameter("tags", vector=True, value=["a", 2, False]).serialize()
        self.assertEqual(json.loads(serialized), ["a", "2", "0"])

    def testCustomSerializer(self):
        parameter = Parameter("ratio", "numeric", value=0.5, serializer=lambda value: "%.2f" % value)
        self.assertEqual(parameter.serialize(), "0.50")


if __name__ == "__main__":
    unittest.main()
