"""Shared pytest fixtures for the Function Forge test suite.

Provides reusable fixtures for:
- Temporary repositories with a marker directory and a manifest file
- A recording fake of the ``dotnet`` CLI that simulates template output on
  disk, project references and manifest registration
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from forge.config import ForgeConfig
from forge.errors import ExternalToolError


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_repo(tmp_path: Path) -> Path:
    """Directory with a ``.git`` marker and a single ``Repo.sln`` manifest."""
    repo = tmp_path / "repo"
    repo.mkdir()
    (repo / ".git").mkdir()
    (repo / "Repo.sln").write_text("Microsoft Visual Studio Solution File\n", encoding="utf-8")
    return repo


@pytest.fixture
def config() -> ForgeConfig:
    """Default configuration, independent of any ``FORGE_*`` variables."""
    return ForgeConfig()


@pytest.fixture(autouse=True)
def _clean_forge_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer ``FORGE_*`` variables out of the tests."""
    import os

    for key in list(os.environ):
        if key.startswith("FORGE_"):
            monkeypatch.delenv(key, raising=False)


# ---------------------------------------------------------------------------
# Fake dotnet CLI
# ---------------------------------------------------------------------------

FUNCTION_TEMPLATE = "lambda.EmptyFunction"


class FakeDotnet:
    """Stands in for ``ProcessRunner`` and mimics the dotnet templates on disk.

    * ``new lambda.EmptyFunction -n U -o O`` creates ``O/src/U/`` and
      ``O/test/U.Tests/`` (one extra nesting level).
    * ``new classlib|xunit -n U -o O`` creates ``O/U.csproj`` directly.
    * ``add P reference T...`` records the references.
    * ``sln M add P...`` appends one line per project to the manifest.

    ``fail_when`` receives ``(command, arguments)`` and returns ``True`` for
    the invocation that should exit non-zero.
    """

    def __init__(self, fail_when: Callable[[str, list[str]], bool] | None = None) -> None:
        self.calls: list[tuple[str, list[str], Path | None]] = []
        self.references: dict[Path, list[Path]] = {}
        self.fail_when = fail_when

    def run(self, command: str, arguments: list[str], working_directory=None) -> str:
        args = [str(a) for a in arguments]
        self.calls.append((command, args, Path(working_directory) if working_directory else None))
        if self.fail_when and self.fail_when(command, args):
            raise ExternalToolError(command, args, 1, stdout="partial", stderr="boom")

        verb = args[0]
        if verb == "new":
            self._new(template=args[1], unit=args[args.index("-n") + 1], out=Path(args[args.index("-o") + 1]))
        elif verb == "add":
            project = Path(args[1])
            targets = [Path(a) for a in args[3:]]
            self.references.setdefault(project, []).extend(targets)
        elif verb == "sln":
            manifest = Path(args[1])
            with manifest.open("a", encoding="utf-8") as handle:
                for project in args[3:]:
                    handle.write(f"Project = {project}\n")
        return f"{verb} ok\n"

    @staticmethod
    def _new(template: str, unit: str, out: Path) -> None:
        if template == FUNCTION_TEMPLATE:
            src = out / "src" / unit
            test = out / "test" / f"{unit}.Tests"
            src.mkdir(parents=True, exist_ok=True)
            test.mkdir(parents=True, exist_ok=True)
            (src / f"{unit}.csproj").write_text("<Project />\n", encoding="utf-8")
            (src / "Function.cs").write_text("// function\n", encoding="utf-8")
            (src / "aws-lambda-tools-defaults.json").write_text("{}\n", encoding="utf-8")
            (test / f"{unit}.Tests.csproj").write_text("<Project />\n", encoding="utf-8")
            (test / "FunctionTest.cs").write_text("// test\n", encoding="utf-8")
        else:
            out.mkdir(parents=True, exist_ok=True)
            (out / f"{unit}.csproj").write_text("<Project />\n", encoding="utf-8")
            (out / ("UnitTest1.cs" if template == "xunit" else "Class1.cs")).write_text(
                "// code\n", encoding="utf-8"
            )

    # -- Assertion helpers -------------------------------------------------

    def verbs(self) -> list[str]:
        return [args[0] for _, args, _ in self.calls]

    def edges(self) -> set[tuple[str, str]]:
        return {
            (project.stem, target.stem)
            for project, targets in self.references.items()
            for target in targets
        }


def manifest_entries(manifest: Path) -> list[str]:
    """Project paths registered in a manifest written by ``FakeDotnet``."""
    return [
        line[len("Project = "):]
        for line in manifest.read_text(encoding="utf-8").splitlines()
        if line.startswith("Project = ")
    ]


@pytest.fixture
def fake_dotnet() -> FakeDotnet:
    """A recording fake dotnet CLI that always succeeds."""
    return FakeDotnet()


@pytest.fixture
def make_fake_dotnet() -> Callable[..., FakeDotnet]:
    """Factory for fakes configured to fail on a chosen invocation."""
    return FakeDotnet


@pytest.fixture
def read_manifest() -> Callable[[Path], list[str]]:
    """Reads the project entries a ``FakeDotnet`` wrote to a manifest."""
    return manifest_entries
