"""Main scaffolding orchestrator.

Drives the external template generators, normalises their output into the
repository layout, wires project references and registers every generated
project with the repository manifest.

A run is an explicit sequence of named steps.  The first step that fails
stops the run and is recorded in the returned ``ScaffoldResult``; whatever the
earlier steps created on disk or in the manifest is left in place.
"""

from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

from forge.config import ForgeConfig
from forge.errors import FilesystemError, ScaffoldError
from forge.process import ProcessRunner
from forge.repository import RepositoryContext, RepositoryLocator
from forge.scaffolder.graph import LAYERED_EDGES, wiring_order
from forge.scaffolder.merger import merge_directory, move_directory, remove_if_empty, remove_tree
from forge.scaffolder.models import (
    GeneratedUnit,
    ProjectSpec,
    ReferenceEdge,
    ScaffoldResult,
    TemplateKind,
    UnitRole,
)
from forge.utils import print_step

Step = tuple[str, Callable[[ScaffoldResult], None]]

LAYERED_SOURCE_ROLES = (UnitRole.APPLICATION, UnitRole.DOMAIN, UnitRole.INFRASTRUCTURE)
LAYERED_TEST_ROLES = (UnitRole.APPLICATION_TESTS, UnitRole.DOMAIN_TESTS)


class ScaffoldOrchestrator:
    """Scaffolds one function project inside the current repository.

    Construction locates the repository root and its single manifest file, so
    configuration errors surface before any external tool is invoked.

    Attributes:
        spec: The project to scaffold.
        config: Tool and layout configuration.
        context: Repository root and manifest path.
        function_root: ``<root>/<functions_dir>/<name>``.
    """

    def __init__(
        self,
        spec: ProjectSpec,
        config: ForgeConfig | None = None,
        runner: ProcessRunner | None = None,
        start_dir: str | Path | None = None,
    ) -> None:
        self.spec = spec
        marker = (config or ForgeConfig.from_env()).repository_marker
        root = RepositoryLocator(marker).locate(start_dir)
        self.config = config or ForgeConfig.discover(root)
        self.context = RepositoryContext.at_root(root, self.config.manifest_glob)
        self.runner = runner or ProcessRunner(echo_commands=self.config.verbose)
        self.function_root = root / self.config.functions_dir / spec.name
        print_step(f"Targeting manifest file: {self.context.manifest_path.name}")

    # -- Public API --------------------------------------------------------

    def scaffold(self) -> ScaffoldResult:
        """Run the flow selected by ``spec.template_kind``."""
        if self.spec.template_kind == TemplateKind.LAYERED:
            return self.create_layered()
        return self.create_simple()

    def create_simple(self) -> ScaffoldResult:
        """Generate a single ``<name>.Lambda`` unit and its test project."""
        role = UnitRole.LAMBDA
        unit_name = role.unit_name(self.spec.name)
        test_name = UnitRole.LAMBDA_TESTS.unit_name(self.spec.name)
        unit_dir = self._src_dir(role)
        test_dir = self._test_dir(UnitRole.LAMBDA_TESTS)

        def generate(result: ScaffoldResult) -> None:
            print_step(f"Generating base structure for '{unit_name}'...")
            self._generate(self.config.function_template, unit_name, unit_dir)

        def flatten(result: ScaffoldResult) -> None:
            print_step("Flattening directory structure...")
            merge_directory(unit_dir / "src" / unit_name, unit_dir)
            merge_directory(unit_dir / "test" / test_name, test_dir)
            for holder in (unit_dir / "src", unit_dir / "test"):
                remove_if_empty(holder)
            result.units.append(self._unit(role, unit_dir, test_dir=test_dir))
            result.units.append(self._unit(UnitRole.LAMBDA_TESTS, test_dir))

        def register(result: ScaffoldResult) -> None:
            print_step("Adding projects to manifest...")
            self._register(result.project_files)

        return self._run_steps(
            [("generate function", generate), ("flatten", flatten), ("register", register)]
        )

    def create_layered(self) -> ScaffoldResult:
        """Generate Application, Domain and Infrastructure units with tests.

        The function generator always nests its output and creates a test
        project of its own, so Application is generated into a scratch
        directory and only its source project is moved into place.
        """
        app_name = UnitRole.APPLICATION.unit_name(self.spec.name)
        scratch: dict[str, Path] = {}

        def generate_library(role: UnitRole) -> Callable[[ScaffoldResult], None]:
            def step(result: ScaffoldResult) -> None:
                target = self._src_dir(role)
                print_step(f"Generating {role.value} layer...")
                self._generate(self.config.library_template, role.unit_name(self.spec.name), target)
                result.units.append(self._unit(role, target))
            return step

        def generate_application(result: ScaffoldResult) -> None:
            print_step(f"Generating '{app_name}' in a scratch directory...")
            scratch["path"] = self._make_scratch_dir()
            self._generate(self.config.function_template, app_name, scratch["path"])

        def relocate_application(result: ScaffoldResult) -> None:
            print_step(f"Moving '{app_name}' into place...")
            target = self._src_dir(UnitRole.APPLICATION)
            move_directory(scratch["path"] / "src" / app_name, target)
            remove_tree(scratch["path"])
            result.units.append(self._unit(UnitRole.APPLICATION, target))

        def generate_tests(role: UnitRole) -> Callable[[ScaffoldResult], None]:
            def step(result: ScaffoldResult) -> None:
                target = self._test_dir(role)
                print_step(f"Generating {role.value} project...")
                self._generate(self.config.test_template, role.unit_name(self.spec.name), target)
                result.units.append(self._unit(role, target))
            return step

        def wire_references(result: ScaffoldResult) -> None:
            print_step("Setting up project references...")
            files = {unit.role: unit.project_file for unit in result.units}
            for consumer, dependencies in wiring_order(LAYERED_EDGES, files):
                self._run(
                    ["add", str(files[consumer]), "reference"]
                    + [str(files[dep]) for dep in dependencies]
                )
                result.edges.extend(
                    ReferenceEdge(from_unit=consumer, to_unit=dep) for dep in dependencies
                )

        def register(result: ScaffoldResult) -> None:
            print_step("Adding all projects to manifest...")
            self._register(self._layered_order(result.units))

        steps: list[Step] = [
            ("generate domain", generate_library(UnitRole.DOMAIN)),
            ("generate infrastructure", generate_library(UnitRole.INFRASTRUCTURE)),
            ("generate application", generate_application),
            ("relocate application", relocate_application),
            ("generate domain tests", generate_tests(UnitRole.DOMAIN_TESTS)),
            ("generate application tests", generate_tests(UnitRole.APPLICATION_TESTS)),
            ("wire references", wire_references),
            ("register", register),
        ]
        return self._run_steps(steps)

    # -- Step execution ----------------------------------------------------

    def _run_steps(self, steps: list[Step]) -> ScaffoldResult:
        result = ScaffoldResult(spec=self.spec, function_root=self.function_root)
        for name, step in steps:
            try:
                step(result)
            except ScaffoldError as exc:
                result.failed_step = name
                result.error = exc
                return result
            result.steps_completed.append(name)
        return result

    # -- External tools ----------------------------------------------------

    def _run(self, arguments: list[str]) -> str:
        return self.runner.run(self.config.tool, arguments, self.context.root_path)

    def _generate(self, template: str, unit_name: str, output_dir: Path) -> None:
        self._run(["new", template, "-n", unit_name, "-o", str(output_dir)])

    def _register(self, project_files: list[Path]) -> None:
        manifest = str(self.context.manifest_path)
        if self.config.batch_registration:
            self._run(["sln", manifest, "add"] + [str(p) for p in project_files])
            return
        for project_file in project_files:
            self._run(["sln", manifest, "add", str(project_file)])

    # -- Paths -------------------------------------------------------------

    def _src_dir(self, role: UnitRole) -> Path:
        return self.function_root / "src" / role.unit_name(self.spec.name)

    def _test_dir(self, role: UnitRole) -> Path:
        return self.function_root / "test" / role.unit_name(self.spec.name)

    def _make_scratch_dir(self) -> Path:
        try:
            self.function_root.mkdir(parents=True, exist_ok=True)
            return Path(tempfile.mkdtemp(prefix=self.config.scratch_prefix, dir=self.function_root))
        except OSError as exc:
            raise FilesystemError("create scratch directory", self.function_root, str(exc)) from exc

    def _unit(self, role: UnitRole, directory: Path, test_dir: Path | None = None) -> GeneratedUnit:
        unit_name = role.unit_name(self.spec.name)
        project_file = directory / f"{unit_name}{self.config.project_extension}"
        if not project_file.is_file():
            raise FilesystemError("locate project", project_file, "expected project file was not generated")
        return GeneratedUnit(
            role=role,
            unit_name=unit_name,
            source_dir=directory,
            test_dir=test_dir,
            project_file=project_file,
        )

    @staticmethod
    def _layered_order(units: list[GeneratedUnit]) -> list[Path]:
        order = LAYERED_SOURCE_ROLES + LAYERED_TEST_ROLES
        by_role = {unit.role: unit.project_file for unit in units}
        return [by_role[role] for role in order if role in by_role]
