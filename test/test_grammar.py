"""
Grammar compiler tests.

Scope
- dash names, toggle naming and uniqueness
- usage/display tokens for arguments and options (short aliases, vectors)
- requiredness and rendered descriptions (defaults, quoting, type tags)
"""
import unittest
from unittest import TestCase

from cliogram import Category, DuplicateElementNameError, FaultCode, Parameter
from cliogram.grammar import compile


class NamingTest(TestCase):
    def testDashNames(self):
        elements = compile([Parameter("outputPath", element="argument"), Parameter("maxRetries")])
        self.assertEqual(elements.arguments["outputPath"].usage, "<output-path>")
        self.assertEqual(elements.options["maxRetries"].usage, "--max-retries=<value>")

    def testToggleDefaultingToTrueIsNegated(self):
        elements = compile([Parameter("force", "bool", value=True)])
        self.assertEqual(elements.options["force"].usage, "--no-force")
        self.assertEqual(elements.options["force"].display, "--no-force")

    def testToggleDefaultingToFalseKeepsName(self):
        for value in (False, None):
            with self.subTest(value=value):
                elements = compile([Parameter("force", "bool", value=value)])
                self.assertEqual(elements.options["force"].usage, "--force")

    def testDuplicateNamesRaise(self):
        with self.assertRaises(DuplicateElementNameError) as context:
            compile([Parameter("verbose"), Parameter("Verbose")])
        self.assertIs(context.exception.code, FaultCode.DUPLICATE_ELEMENT)
        self.assertIn("verbose", str(context.exception))

    def testDuplicateShortAliasesRaise(self):
        with self.assertRaises(DuplicateElementNameError) as context:
            compile([
                Parameter("verbose", "bool", value=False, short="v"),
                Parameter("level", short="v", required=False),
            ])
        self.assertIs(context.exception.code, FaultCode.DUPLICATE_ELEMENT)
        self.assertIn("-v", str(context.exception))

    def testDistinctShortAliasesCompile(self):
        elements = compile([Parameter("verbose", "bool", short="v"), Parameter("level", short="l")])
        self.assertEqual([element.short for element in elements.options.values()], ["-v", "-l"])

    def testNegatedToggleCollides(self):
        with self.assertRaises(ValueError):
            compile([Parameter("force", "bool", value=True), Parameter("noForce")])

    def testCollisionAcrossCategories(self):
        with self.assertRaises(DuplicateElementNameError):
            compile([Parameter("source", element="argument"), Parameter("source")])


class TokenTest(TestCase):
    def testArgumentTokens(self):
        element = compile([Parameter("outputPath", element="argument")]).arguments["outputPath"]
        self.assertIs(element.category, Category.ARGUMENT)
        self.assertEqual(element.display, "output-path")
        self.assertEqual(element.usage, "<output-path>")
        self.assertEqual(element.key, "<output-path>")
        self.assertIsNone(element.short)

    def testValueOptionWithShort(self):
        element = compile([Parameter("retries", "numeric", short="r")]).options["retries"]
        self.assertEqual(element.short, "-r")
        self.assertEqual(element.short_display, "-r=<value>")
        self.assertEqual(element.usage, "--retries=<value>")
        self.assertEqual(element.key, "--retries")
        self.assertEqual(element.display, "-r=<value>, --retries=<value>")

    def testToggleWithShort(self):
        element = compile([Parameter("verbose", "bool", short="v")]).options["verbose"]
        self.assertEqual(element.short_display, "-v")
        self.assertEqual(element.display, "-v, --verbose")

    def testVectorOption(self):
        element = compile([Parameter("tags", vector=True, short="t")]).options["tags"]
        self.assertTrue(element.vector)
        self.assertEqual(element.usage, "--tags=<value>")
        self.assertEqual(element.display, "-t=<value>..., --tags=<value>...")

    def testDeclarationOrderPreserved(self):
        names = ["zeta", "alpha", "mid", "beta"]
        elements = compile([Parameter(name) for name in names])
        self.assertEqual(list(elements.options), names)
        self.assertEqual(len(elements), 4)
        self.assertEqual([category for category, _ in elements.items()], [Category.ARGUMENT, Category.OPTION])


class RequiredTest(TestCase):
    def testRequiredOnlyWithoutValue(self):
        elements = compile([
            Parameter("a"),
            Parameter("b", value="x"),
            Parameter("c", required=False),
            Parameter("d", "bool"),
            Parameter("e", vector=True, value=[]),
        ])
        self.assertEqual(
            {name: element.required for name, element in elements.options.items()},
            {"a": True, "b": False, "c": False, "d": False, "e": True},
        )


class DescriptionTest(TestCase):
    def describe(self, parameter):
        return compile([parameter]).options[parameter.name].descr

    def testTypeOnly(self):
        self.assertEqual(self.describe(Parameter("name")), "(text type).")

    def testDescrThenType(self):
        self.assertEqual(self.describe(Parameter("name", descr="Your name")), "Your name (text type).")

    def testNumericDefaultUnquoted(self):
        self.assertEqual(self.describe(Parameter("retries", "numeric", value=3)), "[default: 3] (numeric type).")

    def testTextDefaultQuotedAndEscaped(self):
        self.assertEqual(
            self.describe(Parameter("greeting", value='say "hi"', descr="Greeting")),
            'Greeting [default: "say \\"hi\\""] (text type).',
        )

    def testVectorDefaults(self):
        self.assertEqual(
            self.describe(Parameter("tags", vector=True, value=["a", "1"])),
            '[default: "a" 1] (text[] type).',
        )

    def testToggleHasNoDefault(self):
        self.assertEqual(self.describe(Parameter("force", "bool", value=True, descr="Overwrite")), "Overwrite (bool type).")

    def testDescriptionsFollowCurrentValue(self):
        parameter = Parameter("level", value="low")
        self.assertIn('"low"', self.describe(parameter))
        parameter.value = "high"
        self.assertIn('"high"', self.describe(parameter))


if __name__ == "__main__":
    unittest.main()
