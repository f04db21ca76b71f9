"""
Merge engine tests (markers, documentation, ordering).

Scope
- Validate every recognized marker kind and its "Attribute" spelling.
- Validate that unrecognized markers warn and are skipped.
- Validate host marker aliases read from __main__.
- Validate documentation merging and the per-field rules under both orders.
"""
import sys
import unittest
from unittest import TestCase, mock

from jackfruit import (
    Detail,
    Marker,
    MemberKind,
    UnrecognizedMarkerWarning,
    aliases,
    apply_docs,
    apply_markers,
    apply_summary,
    argument,
    description,
    metavar,
    required,
    resolve,
)


class TestMarkers(TestCase):
    """Behavioral tests for apply_markers()."""

    def setUp(self) -> None:
        self.detail = Detail("tools.build:retries", "retries", "int")

    def testDescriptionMarker(self):
        apply_markers(self.detail, [description("Number of attempts")])
        self.assertEqual(self.detail.description, "Number of attempts")

    def testDescriptionMarkerWithoutValueIgnored(self):
        apply_markers(self.detail, [description("kept"), Marker("Description", (None,))])
        self.assertEqual(self.detail.description, "kept")

    def testAliasesMarker(self):
        apply_markers(self.detail, [aliases("-r", "--retries")])
        self.assertEqual(self.detail.aliases, ("-r", "--retries"))

    def testLatestAliasesMarkerWins(self):
        apply_markers(self.detail, [aliases("-r"), aliases("-t", "--tries")])
        self.assertEqual(self.detail.aliases, ("-t", "--tries"))

    def testEmptyAliasesMarkerOverwrites(self):
        apply_markers(self.detail, [aliases("-r"), aliases()])
        self.assertEqual(self.detail.aliases, ())

    def testNoneAliasBecomesEmptyString(self):
        apply_markers(self.detail, [Marker("Aliases", ("-r", None))])
        self.assertEqual(self.detail.aliases, ("-r", ""))

    def testArgumentMarker(self):
        apply_markers(self.detail, [argument()])
        self.assertIs(self.detail.kind, MemberKind.ARGUMENT)

    def testArgumentMarkerOutranksInferredService(self):
        self.detail.refine(kind=MemberKind.SERVICE)
        apply_markers(self.detail, [argument()])
        self.assertIs(self.detail.kind, MemberKind.ARGUMENT)

    def testOptionArgumentNameMarker(self):
        apply_markers(self.detail, [metavar("COUNT")])
        self.assertEqual(self.detail.arg_display_name, "COUNT")

    def testRequiredMarker(self):
        apply_markers(self.detail, [required()])
        self.assertTrue(self.detail.required)

    def testAttributeSpellings(self):
        apply_markers(self.detail, [
            Marker("RequiredAttribute"),
            Marker("DescriptionAttribute", ("Number of attempts",)),
            Marker("AliasesAttribute", ("-r",)),
        ])
        self.assertTrue(self.detail.required)
        self.assertEqual(self.detail.description, "Number of attempts")
        self.assertEqual(self.detail.aliases, ("-r",))

    def testScalarValueNotSplit(self):
        apply_markers(self.detail, [
            Marker("Description", "Number of attempts"),
            Marker("OptionArgumentName", "COUNT"),
            Marker("Aliases", "-r"),
        ])
        self.assertEqual(self.detail.description, "Number of attempts")
        self.assertEqual(self.detail.arg_display_name, "COUNT")
        self.assertEqual(self.detail.aliases, ("-r",))

    def testPlainTuplesAccepted(self):
        apply_markers(self.detail, [("Required", ())])
        self.assertTrue(self.detail.required)

    def testUnrecognizedMarkerWarnsAndIsSkipped(self):
        with self.assertWarns(UnrecognizedMarkerWarning):
            apply_markers(self.detail, [Marker("Hidden"), required()])
        self.assertTrue(self.detail.required)

    def testHostMarkerAliases(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__markers__", {"Desc": "Description"}, create=True):
            self.assertEqual(resolve("Desc"), "Description")
            apply_markers(self.detail, [Marker("Desc", ("Number of attempts",))])
        self.assertEqual(self.detail.description, "Number of attempts")

    def testResolveRejectsNonStrings(self):
        self.assertIsNone(resolve(None))
        self.assertIsNone(resolve("Unknown"))

    def testRejectsNonDetails(self):
        with self.assertRaises(TypeError):
            apply_markers("retries", [required()])


class TestDocumentation(TestCase):
    """Tests for apply_docs() and apply_summary()."""

    def setUp(self) -> None:
        self.details = {
            "configArg": Detail("tools.build:configArg", "config"),
            "retries": Detail("tools.build:retries", "retries"),
        }

    def testDocsTrimmedAndMatchedByName(self):
        apply_docs(self.details, {"retries": "  Number of attempts \n", "unknown": "ignored"})
        self.assertEqual(self.details["retries"].description, "Number of attempts")
        self.assertEqual(self.details["configArg"].description, "")

    def testBlankDocsIgnored(self):
        self.details["retries"].refine(description="kept")
        apply_docs(self.details, {"retries": "   "})
        self.assertEqual(self.details["retries"].description, "kept")

    def testDocsRequireMapping(self):
        with self.assertRaises(TypeError):
            apply_docs(self.details, [("retries", "text")])

    def testSummary(self):
        command = Detail("tools.build", "build")
        apply_summary(command, "\n Build the project.\n")
        apply_summary(command, None)
        self.assertEqual(command.description, "Build the project.")


class TestOrdering(TestCase):
    """Monotonic fields end up the same whichever source comes first."""

    def testRequiredSurvivesEitherOrder(self):
        first = Detail("x", "retries")
        apply_markers(first, [required()])
        apply_docs({"retries": first}, {"retries": "Number of attempts"})

        second = Detail("x", "retries")
        apply_docs({"retries": second}, {"retries": "Number of attempts"})
        apply_markers(second, [required()])

        for detail in (first, second):
            self.assertTrue(detail.required)
            self.assertEqual(detail.description, "Number of attempts")

    def testLaterDescriptionWins(self):
        detail = Detail("x", "retries")
        apply_docs({"retries": detail}, {"retries": "from docs"})
        apply_markers(detail, [description("from marker")])
        self.assertEqual(detail.description, "from marker")


if __name__ == '__main__':
    unittest.main()
