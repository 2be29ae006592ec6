"""
Resolvers behavioral tests (registry, reflection, import and chaining).

Scope
- Validate signature() reflection: mandatory/toggle detection, skipped parameters, overload sets.
- Validate Registry registration forms, case-insensitive lookup, duplicates and suggestions.
- Validate Registry.include() module discovery on a throw-away package.
- Validate ImportResolver and ChainResolver.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import importlib
import json
import os
import sys
import tempfile
import textwrap
import unittest
import uuid
from typing import overload
from unittest import TestCase

from syntaxer import (
    ChainResolver,
    CommandMetadata,
    CommandNotFoundError,
    ImportResolver,
    ParameterDescriptor,
    ParameterSet,
    Registry,
    signature,
)


@overload
def fetch(path: str) -> bytes: ...
@overload
def fetch(*, url: str, verify: bool = True) -> bytes: ...
def fetch(path=None, *, url=None, verify=True):
    return b""


class Runner:
    def run(self, target, *, dry_run: bool = False):
        pass


def describe(metadata, index=0):
    return [(p.name, p.mandatory, p.valued) for p in metadata.sets[index].parameters]


class TestSignature(TestCase):

    def testSingleSetNamedDefault(self):
        def copy_item(path, destination=None, *, recurse: bool = False, depth: int = 1):
            pass

        metadata = signature(copy_item)
        self.assertEqual(metadata.name, "copy_item")
        self.assertEqual([parameters.name for parameters in metadata.sets], ["Default"])
        self.assertEqual(describe(metadata), [
            ("path", True, True),
            ("destination", False, True),
            ("recurse", False, False),
            ("depth", False, True),
        ])

    def testBoolDefaultIsToggle(self):
        def tool(force=False):
            pass

        self.assertEqual(describe(signature(tool)), [("force", False, False)])

    def testVariadicsAreSkipped(self):
        def tool(name, *args, **kwargs):
            pass

        self.assertEqual(describe(signature(tool)), [("name", True, True)])

    def testExplicitName(self):
        def tool():
            pass

        metadata = signature(tool, "Invoke-Tool")
        self.assertEqual(metadata.name, "Invoke-Tool")
        self.assertEqual(describe(metadata), [])

    def testSelfIsSkipped(self):
        self.assertEqual(describe(signature(Runner.run)), [("target", True, True), ("dry_run", False, False)])

    def testOverloadsBecomeSets(self):
        metadata = signature(fetch)
        self.assertEqual([parameters.name for parameters in metadata.sets], ["Overload1", "Overload2"])
        self.assertEqual(describe(metadata, 0), [("path", True, True)])
        self.assertEqual(describe(metadata, 1), [("url", True, True), ("verify", False, False)])

    def testStandardLibraryCallable(self):
        metadata = signature(json.dumps)
        parameters = dict(((p.name, p) for p in metadata.sets[0].parameters))
        self.assertTrue(parameters["obj"].mandatory)
        self.assertFalse(parameters["skipkeys"].valued)
        self.assertNotIn("kw", parameters)

    def testNotCallableRejected(self):
        with self.assertRaises(TypeError):
            signature(42)  # type: ignore[arg-type]

    def testCaseClashIsNotAMissingSignature(self):
        def clash(a, A=1):
            pass

        with self.assertRaises(ValueError) as context:
            signature(clash)
        self.assertIn("duplicated name", str(context.exception))


class TestRegistry(TestCase):

    def setUp(self):
        self.registry = Registry()
        self.metadata = CommandMetadata("Get-Item", (ParameterSet("ByPath", (ParameterDescriptor("Path", True),)),))

    def testRegisterMetadata(self):
        self.assertIs(self.registry.register(self.metadata), self.metadata)
        self.assertIs(self.registry.resolve("Get-Item"), self.metadata)
        self.assertEqual(len(self.registry), 1)
        self.assertEqual(list(self.registry), [self.metadata])

    def testLookupIgnoresCase(self):
        self.registry.register(self.metadata)
        self.assertIs(self.registry.resolve("get-item"), self.metadata)
        self.assertIn("GET-ITEM", self.registry)

    def testCaseSensitiveRegistry(self):
        registry = Registry(ignorecase=False)
        registry.register(self.metadata)
        with self.assertRaises(CommandNotFoundError):
            registry.resolve("get-item")

    def testDuplicateRejected(self):
        self.registry.register(self.metadata)
        with self.assertRaises(ValueError):
            self.registry.register(CommandMetadata("GET-ITEM"))

    def testRegisterCallable(self):
        def get_child_item(path, *, recurse: bool = False):
            pass

        self.assertIs(self.registry.register(get_child_item, "Get-ChildItem"), get_child_item)
        self.assertEqual(describe(self.registry.resolve("get-childitem")), [("path", True, True), ("recurse", False, False)])

    def testRegisterCallableWithSets(self):
        def tool():
            pass

        sets = (ParameterSet("A", (ParameterDescriptor("X"),)), ParameterSet("B"))
        self.registry.register(tool, sets=sets)
        self.assertEqual(self.registry.resolve("tool").sets, sets)

    def testMetadataCannotBeRenamed(self):
        with self.assertRaises(TypeError):
            self.registry.register(self.metadata, "Other")

    def testUnsupportedSourceRejected(self):
        with self.assertRaises(TypeError):
            self.registry.register("Get-Item")  # type: ignore[arg-type]

    def testBareDecorator(self):
        @self.registry.command
        def stop_service(name, *, force: bool = False):
            pass

        self.assertTrue(callable(stop_service))
        self.assertIn("stop_service", self.registry)

    def testDecoratorWithKeywords(self):
        @self.registry.command(name="Stop-Service")
        def stop_service(name):
            pass

        self.assertEqual(self.registry.resolve("stop-service").name, "Stop-Service")

    def testUnknownCommandSuggestsCloseMatches(self):
        self.registry.register(self.metadata)
        with self.assertRaises(CommandNotFoundError) as context:
            self.registry.resolve("Get-Itme")
        self.assertIn("'Get-Item'", context.exception.options["hint"])
        self.assertEqual(context.exception.options["input"], "Get-Itme")


class TestRegistryInclude(TestCase):

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.package = "syntaxer_fixture_" + uuid.uuid4().hex[:8]
        tools = os.path.join(self.directory.name, self.package, "tools")
        os.makedirs(tools)
        for path in (os.path.join(self.directory.name, self.package), tools):
            with open(os.path.join(path, "__init__.py"), "w", encoding="utf-8"):
                pass
        with open(os.path.join(tools, "files.py"), "w", encoding="utf-8") as file:
            file.write(textwrap.dedent("""
                from syntaxer import CommandMetadata, ParameterDescriptor, ParameterSet

                COPY_ITEM = CommandMetadata("Copy-Item", (
                    ParameterSet("Default", (ParameterDescriptor("Path", True),)),
                ))
                MOVE_ITEM = CommandMetadata("Move-Item")
            """))
        sys.path.insert(0, self.directory.name)
        importlib.invalidate_caches()

    def tearDown(self):
        sys.path.remove(self.directory.name)
        for name in [name for name in sys.modules if name.startswith(self.package)]:
            del sys.modules[name]
        self.directory.cleanup()

    def testIncludeRegistersTopLevelMetadata(self):
        registry = Registry()
        modules = registry.include(self.package + ".tools.*")
        self.assertEqual(modules, [self.package + ".tools.files"])
        self.assertIn("copy-item", registry)
        self.assertIn("Move-Item", registry)

    def testIncludeTwiceIsHarmless(self):
        registry = Registry()
        registry.include(self.package + ".tools.files")
        registry.include(self.package + ".tools.files")
        self.assertEqual(len(registry), 2)

    def testMissingModuleRaises(self):
        with self.assertRaises(TypeError):
            Registry().include(self.package + ".tools.missing")

    def testMissingPrefixMatchesNothing(self):
        self.assertEqual(Registry().include("syntaxer_no_such_package_.*"), [])

    def testNonStringRejected(self):
        with self.assertRaises(TypeError):
            Registry().include(None)  # type: ignore[arg-type]


class TestImportResolver(TestCase):

    def testDottedPath(self):
        metadata = ImportResolver().resolve("json.dumps")
        self.assertEqual(metadata.name, "json.dumps")
        self.assertEqual(metadata.sets[0].parameters[0].name, "obj")

    def testColonPath(self):
        metadata = ImportResolver().resolve("json:JSONDecoder.decode")
        self.assertEqual(metadata.sets[0].parameters[0].name, "s")

    def testUnknownPathRaises(self):
        for name in ("json.nothing_here", "no_such_module_at_all.run", "plain"):
            with self.subTest(name=name), self.assertRaises(CommandNotFoundError):
                ImportResolver().resolve(name)


class TestImportResolverFailures(TestCase):

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.prefix = "syntaxer_fixture_" + uuid.uuid4().hex[:8]
        for suffix, source in (
            ("_broken", "raise RuntimeError('cannot load here')\n"),
            ("_clash", "def clash(a, A=1):\n    pass\n"),
        ):
            with open(os.path.join(self.directory.name, self.prefix + suffix + ".py"), "w", encoding="utf-8") as file:
                file.write(source)
        sys.path.insert(0, self.directory.name)
        importlib.invalidate_caches()

    def tearDown(self):
        sys.path.remove(self.directory.name)
        for name in [name for name in sys.modules if name.startswith(self.prefix)]:
            del sys.modules[name]
        self.directory.cleanup()

    def testFailingImportIsNotFound(self):
        with self.assertRaises(CommandNotFoundError) as context:
            ImportResolver().resolve(self.prefix + "_broken.run")
        self.assertIn("RuntimeError: cannot load here", context.exception.options["hint"])
        self.assertIsInstance(context.exception.__cause__, RuntimeError)

    def testClashingParametersAreReported(self):
        with self.assertRaises(CommandNotFoundError) as context:
            ImportResolver().resolve(self.prefix + "_clash.clash")
        self.assertIn("cannot be described", context.exception.message)
        self.assertIn("duplicated name", context.exception.options["hint"])


class TestChainResolver(TestCase):

    def testFirstHitWins(self):
        registry = Registry()
        registry.register(CommandMetadata("json.dumps"))
        self.assertEqual(ChainResolver(registry, ImportResolver()).resolve("json.dumps").sets, ())

    def testFallsThrough(self):
        self.assertEqual(ChainResolver(Registry(), ImportResolver()).resolve("json.dumps").sets[0].name, "Default")

    def testFirstFaultIsRaised(self):
        with self.assertRaises(CommandNotFoundError) as context:
            ChainResolver(Registry(), ImportResolver()).resolve("Get-Nothing")
        self.assertIn("is not known", context.exception.message)

    def testResolversAreChecked(self):
        with self.assertRaises(TypeError):
            ChainResolver(object())


if __name__ == "__main__":
    unittest.main()
