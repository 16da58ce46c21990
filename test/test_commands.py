"""
Commands module behavioral tests.

Scope
- Validate the deferred-error builder: first failure recorded, later calls
  ignored, build() raising it.
- Validate Command.parse: subcommand dispatch, option/flag parsing, required
  arguments, defaults, help, and every structural failure with its diagnostic.
- Validate the usage layouts written on failure.

Conventions
- Test method names follow CamelCase per project convention.
- Handlers record the params they receive instead of printing.
"""

import io
import re
import unittest
from contextlib import redirect_stdout
from unittest import TestCase

from clack import (
    Argument,
    Command,
    Flag,
    Value,
    ValueType,
    ExpectedArgumentValueError,
    HandlerError,
    NotEnoughInputError,
    ParseArgumentValueError,
    ParseIntegerError,
    RequiredArgumentError,
    UnexpectedCommandError,
    UnknownArgumentError,
    FaultCode,
)


def recorder():
    calls = []
    return calls, calls.append


class TestCommandBuilder(TestCase):
    """Behavioral tests for the deferred-error builder."""

    def testChainReturnsCommand(self):
        command = Command("foo")
        self.assertIs(command.set_description("does foo"), command)
        self.assertIs(command.add_argument(Argument("name", ValueType.STRING)), command)
        self.assertIs(command.build(), command)
        self.assertIsNone(command.build_error)

    def testFirstFailureWinsAndLaterCallsAreIgnored(self):
        command = (
            Command("foo")
            .add_argument("not an argument")
            .set_handler(42)
            .add_argument(Argument("name", ValueType.STRING))
        )
        self.assertIsInstance(command.build_error, TypeError)
        self.assertIn("arguments", str(command.build_error))
        self.assertEqual(command.arguments, ())
        self.assertIsNone(command.handler)
        with self.assertRaises(TypeError):
            command.build()
        # build() keeps failing with the same recorded error
        with self.assertRaises(TypeError) as context:
            command.build()
        self.assertIs(context.exception, command.build_error)

    def testDuplicateLongNameRejected(self):
        command = (
            Command("foo")
            .add_argument(Argument("name", ValueType.STRING))
            .add_argument(Argument("name", ValueType.INTEGER))
        )
        with self.assertRaises(ValueError):
            command.build()
        self.assertEqual(len(command.arguments), 1)

    def testDuplicateShortNameRejected(self):
        command = (
            Command("foo")
            .add_argument(Argument("name", ValueType.STRING).set_short("n"))
            .add_flag(Flag("new").set_short("n"))
        )
        with self.assertRaises(ValueError):
            command.build()

    def testSameNamesInDifferentCommandsAllowed(self):
        root = (
            Command("root")
            .add_argument(Argument("name", ValueType.STRING))
            .add_command(Command("child").add_argument(Argument("name", ValueType.STRING)))
        )
        self.assertIs(root.build(), root)

    def testDuplicateSiblingRejected(self):
        root = Command("root").add_command(Command("a")).add_command(Command("a"))
        with self.assertRaises(ValueError):
            root.build()
        self.assertEqual(list(root.commands), ["a"])

    def testHelpNameReserved(self):
        with self.assertRaises(ValueError):
            Command("root").add_command(Command("help")).build()

    def testChildBuildErrorPropagates(self):
        child = Command("child").set_description(3)
        root = Command("root").add_command(child)
        self.assertIs(root.build_error, child.build_error)
        self.assertNotIn("child", root.commands)

    def testAddFlagRequiresFlag(self):
        with self.assertRaises(TypeError):
            Command("foo").add_flag(Argument("name", ValueType.STRING)).build()

    def testInvalidHandlerAndDescription(self):
        with self.assertRaises(TypeError):
            Command("foo").set_handler("print").build()
        with self.assertRaises(ValueError):
            Command("foo").set_description("   ").build()

    def testNameValidatedEagerly(self):
        with self.assertRaises(TypeError):
            Command(3)
        with self.assertRaises(ValueError):
            Command("")
        with self.assertRaises(ValueError):
            Command("--foo")

    def testIntrospection(self):
        name = Argument("name", ValueType.STRING).set_short("n").set_required()
        command = Command("foo").add_argument(name).add_flag(Flag("enable"))
        self.assertIs(command.find("n"), name)
        self.assertIs(command.find("name"), name)
        self.assertIsNone(command.find("missing"))
        self.assertEqual(command.required_argument_count(), 1)
        with self.assertRaises(TypeError):
            command.commands["x"] = Command("x")


class TestCommandParse(TestCase):
    """Behavioral tests for Command.parse()."""

    def setUp(self):
        self.calls, handler = recorder()
        self.command = (
            Command("foo")
            .add_argument(Argument("name", ValueType.STRING).set_short("n").set_required())
            .add_flag(Flag("enable").set_short("e"))
            .set_handler(handler)
            .build()
        )

    def testLongOption(self):
        self.command.parse(["--name", "jane"])
        self.assertEqual(self.calls, [{"name": Value.string("jane"), "enable": Value.boolean(False)}])

    def testShortOptionAndFlag(self):
        self.command.parse(["-n", "jane doe", "-e"])
        self.assertEqual(self.calls, [{"name": Value.string("jane doe"), "enable": Value.boolean(True)}])

    def testFlagNeverConsumesNextToken(self):
        self.command.parse(["--enable", "--name", "jane"])
        self.assertEqual(self.calls[0]["enable"], Value.boolean(True))
        self.assertEqual(self.calls[0]["name"], Value.string("jane"))

    def testRepeatedOptionLastWins(self):
        self.command.parse(["-n", "a", "--name", "b"])
        self.assertEqual(self.calls[0]["name"], Value.string("b"))

    def testNoTokensWithRequiredArgument(self):
        writer = io.StringIO()
        with self.assertRaises(NotEnoughInputError) as context:
            self.command.parse([], writer)
        self.assertTrue(writer.getvalue().startswith("Error: not enough arguments for command: `foo`.\nUsage: foo"))
        self.assertIs(context.exception.code, FaultCode.NOT_ENOUGH_INPUT)
        self.assertEqual(self.calls, [])

    def testUnknownArgument(self):
        writer = io.StringIO()
        with self.assertRaises(UnknownArgumentError) as context:
            self.command.parse(["--name", "jane", "--nope"], writer)
        self.assertEqual(context.exception.options["token"], "--nope")
        self.assertTrue(writer.getvalue().startswith(
            "Error: unknown argument `--nope` for command: `foo`.\nUsage: foo [SUBCOMMAND] [OPTIONS]\n"
        ))
        self.assertEqual(self.calls, [])

    def testBareTokenAfterOptionsIsUnknown(self):
        with self.assertRaises(UnknownArgumentError):
            self.command.parse(["--name", "jane", "extra"])

    def testExpectedArgumentValue(self):
        writer = io.StringIO()
        with self.assertRaises(ExpectedArgumentValueError):
            self.command.parse(["--name"], writer)
        self.assertIn("Error: expected value for argument: `--name`.\n", writer.getvalue())

    def testRequiredArgument(self):
        writer = io.StringIO()
        with self.assertRaises(RequiredArgumentError) as context:
            self.command.parse(["-e"], writer)
        self.assertEqual(context.exception.message, "required argument: `name`.")
        self.assertTrue(writer.getvalue().startswith("Error: required argument: `name`.\n"))

    def testUnexpectedCommand(self):
        writer = io.StringIO()
        with self.assertRaises(UnexpectedCommandError):
            self.command.parse(["bar"], writer)
        self.assertTrue(writer.getvalue().startswith("Error: unexpected command: `bar`.\n"))

    def testParseRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            self.command.parse("--name jane")
        with self.assertRaises(TypeError):
            self.command.parse(["--name", 3])


class TestCommandValues(TestCase):
    """Behavioral tests for typed values, defaults and handlers."""

    def setUp(self):
        self.calls, handler = recorder()
        self.command = (
            Command("count")
            .add_argument(Argument("count", ValueType.INTEGER).set_short("c").set_default(Value.integer(12)))
            .add_argument(Argument("ratio", ValueType.FLOAT))
            .set_handler(handler)
            .build()
        )

    def testDefaultBackfilled(self):
        self.command.parse([])
        self.assertEqual(self.calls, [{"count": Value.integer(12)}])

    def testExplicitValueOverridesDefault(self):
        self.command.parse(["-c", "8", "--ratio", "0.5"])
        self.assertEqual(self.calls, [{"count": Value.integer(8), "ratio": Value.float(0.5)}])

    def testNegativeNumbersAreValues(self):
        self.command.parse(["-c", "-5"])
        self.assertEqual(self.calls[0]["count"], Value.integer(-5))

    def testParseArgumentValueError(self):
        writer = io.StringIO()
        with self.assertRaises(ParseArgumentValueError) as context:
            self.command.parse(["-c", "jane"], writer)
        self.assertIsInstance(context.exception.reason, ParseIntegerError)
        self.assertIs(context.exception.__cause__, context.exception.reason)
        self.assertEqual(context.exception.options["value"], "jane")
        self.assertTrue(writer.getvalue().startswith("Error: parsing value for argument: `-c`.\n"))
        self.assertEqual(self.calls, [])

    def testRequiredWithDefaultStillFailsWhenOmitted(self):
        command = (
            Command("x")
            .add_argument(Argument("size", ValueType.INTEGER).set_default(Value.integer(1)).set_required())
            .add_flag(Flag("verbose").set_short("v"))
        )
        with self.assertRaises(RequiredArgumentError):
            command.parse(["-v"])

    def testHandlerFailureIsWrapped(self):
        failure = RuntimeError("boom")

        def handler(params):
            raise failure

        writer = io.StringIO()
        command = Command("explode").set_handler(handler).build()
        with self.assertRaises(HandlerError) as context:
            command.parse([], writer)
        self.assertIs(context.exception.__cause__, failure)
        self.assertEqual(writer.getvalue(), "Error: handler failed for command: `explode`.\n")

    def testNoHandlerIsFine(self):
        self.assertIsNone(Command("idle").add_argument(Argument("x", ValueType.STRING)).parse(["--x", "1"]))


class TestCommandTree(TestCase):
    """Behavioral tests for dispatch, help and usage rendering."""

    def setUp(self):
        self.calls, handler = recorder()
        self.leaf = (
            Command("bar")
            .set_description("does bar")
            .add_argument(Argument("name", ValueType.STRING).set_short("n").set_description("who"))
            .add_argument(Argument("count", ValueType.INTEGER))
            .set_handler(handler)
        )
        self.root = (
            Command("main")
            .set_description("the main program")
            .add_command(Command("foo").add_command(self.leaf))
            .add_command(Command("quiet"))
            .build()
        )

    def testNestedDispatch(self):
        self.root.parse(["foo", "bar", "-n", "jane"])
        self.assertEqual(self.calls, [{"name": Value.string("jane")}])

    def testArgumentsBelongToTheReachedCommand(self):
        with self.assertRaises(UnknownArgumentError):
            self.root.parse(["foo", "-n", "jane"])

    def testEmptyTokensWithoutRequiredArgumentsDoNothing(self):
        self.assertIsNone(self.root.parse([]))
        self.assertEqual(self.calls, [])

    def testHelpPrintsUsage(self):
        output = io.StringIO()
        with redirect_stdout(output):
            self.root.parse(["foo", "bar", "help", "--ignored"])
        text = re.sub(r"\x1b\[[0-9;]*m", "", output.getvalue())
        self.assertIn("Usage: bar [SUBCOMMAND] [OPTIONS]", text)
        self.assertIn("-n, --name: who", text)
        self.assertEqual(self.calls, [])

    def testUsageWithSubcommands(self):
        writer = io.StringIO()
        with self.assertRaises(UnexpectedCommandError):
            self.root.parse(["nope"], writer)
        self.assertEqual(writer.getvalue(), (
            "Error: unexpected command: `nope`.\n"
            "the main program\n"
            "\n"
            "Usage: main [SUBCOMMAND] [OPTIONS]\n"
            "\n"
            "Subcommands:\n"
            "- foo\n"
            "- quiet\n"
            "- help: prints the command help message\n"
        ))

    def testUsageWithOptions(self):
        writer = io.StringIO()
        with self.assertRaises(UnknownArgumentError):
            self.root.parse(["foo", "bar", "--what"], writer)
        self.assertEqual(writer.getvalue(), (
            "Error: unknown argument `--what` for command: `bar`.\n"
            "Usage: bar [SUBCOMMAND] [OPTIONS]\n"
            "\n"
            "Subcommands:\n"
            "- help: prints the command help message\n"
            "\n"
            "Options:\n"
            "-n, --name: who\n"
            "    --count\n"
        ))

    def testRepr(self):
        self.assertTrue(repr(self.leaf).startswith("command(name='bar', description='does bar', "))


if __name__ == "__main__":
    unittest.main()
