"""End-to-end scaffolding runs against a temporary repository.

The dotnet CLI is replaced by the recording fake from ``conftest.py``; every
other piece (repository discovery, flattening, wiring, registration and the
CLI boundary) runs for real on disk.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from forge.cli import run_function

pytestmark = pytest.mark.integration


class TestSimpleEndToEnd:
    def test_billing_simple(self, fake_repo: Path, fake_dotnet, read_manifest):
        code = run_function("Billing", "simple", runner=fake_dotnet, start_dir=fake_repo)

        root = fake_repo.resolve() / "functions" / "Billing"
        src_proj = root / "src" / "Billing.Lambda" / "Billing.Lambda.csproj"
        test_proj = root / "test" / "Billing.Lambda.Tests" / "Billing.Lambda.Tests.csproj"
        assert code == 0
        assert src_proj.is_file()
        assert test_proj.is_file()
        entries = read_manifest(fake_repo / "Repo.sln")
        assert entries.count(str(src_proj)) == 1
        assert entries.count(str(test_proj)) == 1

    def test_two_manifests_fail_before_any_side_effect(self, fake_repo: Path, fake_dotnet, capsys):
        (fake_repo / "Other.sln").write_text("", encoding="utf-8")

        code = run_function("Billing", "simple", runner=fake_dotnet, start_dir=fake_repo)

        assert code != 0
        assert fake_dotnet.calls == []
        assert not (fake_repo / "functions" / "Billing").exists()
        assert "Multiple manifest files" in capsys.readouterr().err

    def test_no_manifest(self, fake_repo: Path, fake_dotnet):
        (fake_repo / "Repo.sln").unlink()
        assert run_function("Billing", "layered", runner=fake_dotnet, start_dir=fake_repo) == 1
        assert fake_dotnet.calls == []


class TestLayeredEndToEnd:
    def test_billing_layered(self, fake_repo: Path, fake_dotnet, read_manifest):
        code = run_function("Billing", "layered", runner=fake_dotnet, start_dir=fake_repo)

        root = fake_repo.resolve() / "functions" / "Billing"
        projects = sorted(root.rglob("*.csproj"))
        assert code == 0
        assert [p.stem for p in projects] == [
            "Billing.Application",
            "Billing.Domain",
            "Billing.Infrastructure",
            "Billing.Application.Tests",
            "Billing.Domain.Tests",
        ]
        assert sorted(read_manifest(fake_repo / "Repo.sln")) == sorted(str(p) for p in projects)
        assert fake_dotnet.edges() == {
            ("Billing.Application", "Billing.Domain"),
            ("Billing.Application", "Billing.Infrastructure"),
            ("Billing.Infrastructure", "Billing.Domain"),
            ("Billing.Domain.Tests", "Billing.Domain"),
            ("Billing.Application.Tests", "Billing.Application"),
        }

    def test_second_function_alongside_first(self, fake_repo: Path, fake_dotnet, read_manifest):
        assert run_function("Billing", "simple", runner=fake_dotnet, start_dir=fake_repo) == 0
        assert run_function("Orders", "layered", runner=fake_dotnet, start_dir=fake_repo) == 0

        functions = fake_repo / "functions"
        assert sorted(p.name for p in functions.iterdir()) == ["Billing", "Orders"]
        assert len(read_manifest(fake_repo / "Repo.sln")) == 7
