# tests/unit/test_main.py - v2
"""Tests for main.py - CLI entry point."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest

from docsync.core.models import VerificationRecord, VerificationStatus
from docsync.main import _build_parser, main
from docsync.pipeline.orchestrator import DocSyncOrchestrator


@pytest.fixture
def isolated_cwd(tmp_path, monkeypatch):
    """Run from a directory without a .env file."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def orchestrator(fake_source, make_generator, make_oracle, make_translator, make_output, failed_record):
    return DocSyncOrchestrator(
        fake_source,
        generator=make_generator(make_output()),
        oracle=make_oracle(failed_record),
        translator=make_translator(),
    )


# ---------------------------------------------------------------------------
# Parser tests
# ---------------------------------------------------------------------------

class TestBuildParser:
    def test_version_flag(self):
        with pytest.raises(SystemExit) as exc_info:
            _build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0

    def test_list_subcommand(self):
        args = _build_parser().parse_args(["list", "https://github.com/acme/widgets"])
        assert args.command == "list"
        assert args.target == "https://github.com/acme/widgets"

    def test_document_subcommand(self):
        args = _build_parser().parse_args(
            ["document", ".", "src/math.ts", "--language", "fr", "--verify"]
        )
        assert args.command == "document"
        assert args.path == "src/math.ts"
        assert args.language == "fr"
        assert args.verify is True
        assert args.apply_fix is False

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "docsync" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class TestListCommand:
    def test_lists_documentable_files(self, isolated_cwd, capsys):
        (isolated_cwd / "src").mkdir()
        (isolated_cwd / "src" / "math.ts").write_text("export const a = 1;\n")
        (isolated_cwd / "README.md").write_text("# readme\n")

        with patch("docsync.api.facade.LLMFactory", MagicMock()):
            code = main(["list", str(isolated_cwd)])

        assert code == 0
        assert capsys.readouterr().out.splitlines() == ["src/math.ts"]

    def test_missing_directory_fails(self, isolated_cwd):
        assert main(["list", str(isolated_cwd / "missing")]) == 1


class TestDocumentCommand:
    def test_document_translate(self, isolated_cwd, orchestrator, fake_source, capsys):
        with patch("docsync.api.facade.open_source", return_value=fake_source), patch(
            "docsync.api.facade.create_orchestrator", return_value=orchestrator,
        ):
            code = main(["document", "repo", "src/math.ts", "--language", "fr"])

        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["tier"] == "strict"
        assert output["from_cache"] is False
        assert output["document"]["language"] == "fr"
        assert output["document"]["summary"] == "[fr] Adds two numbers."

    def test_apply_fix(self, isolated_cwd, orchestrator, fake_source, failed_record, capsys):
        with patch("docsync.api.facade.open_source", return_value=fake_source), patch(
            "docsync.api.facade.create_orchestrator", return_value=orchestrator,
        ):
            code = main(["document", "repo", "src/math.ts", "--apply-fix"])

        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["fix_applied"] is True
        section = output["document"]["sections"][0]
        assert section["code_example"] == failed_record.fixed_code
        assert output["document"]["verification"]["status"] == VerificationStatus.IDLE.value

    def test_verify_success_no_fix(self, isolated_cwd, fake_source, make_generator, make_oracle,
                                   make_translator, make_output, capsys):
        orch = DocSyncOrchestrator(
            fake_source,
            generator=make_generator(make_output()),
            oracle=make_oracle(VerificationRecord(status=VerificationStatus.SUCCESS)),
            translator=make_translator(),
        )
        with patch("docsync.api.facade.open_source", return_value=fake_source), patch(
            "docsync.api.facade.create_orchestrator", return_value=orch,
        ):
            code = main(["document", "repo", "src/math.ts", "--apply-fix"])

        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert "fix_applied" not in output
        assert output["document"]["verification"]["status"] == "SUCCESS"

    def test_unsupported_language(self, isolated_cwd):
        assert main(["document", "repo", "src/math.ts", "--language", "xx"]) == 1

    def test_fetch_error_exit_code(self, isolated_cwd, orchestrator, fake_source):
        fake_source.files.clear()
        with patch("docsync.api.facade.open_source", return_value=fake_source), patch(
            "docsync.api.facade.create_orchestrator", return_value=orchestrator,
        ):
            assert main(["document", "repo", "src/math.ts"]) == 1

    def test_configuration_error(self, isolated_cwd, monkeypatch):
        monkeypatch.setenv("DEFAULT_LANGUAGE", "xx")
        assert main(["list", str(isolated_cwd)]) == 2
