"""Integration tests for the package-collection-generate command."""

import json

import pytest

from collectiongen.cli import build_parser, main, run
from collectiongen.errors import ManifestUnreadableError
from collectiongen.serialization import read_collection

FOOBAR = "https://package-collection-tests.com/repos/foobar.git"
FOOBAZ = "https://package-collection-tests.com/repos/foobaz.git"


@pytest.fixture
def inspector(scripted_inspector, make_result):
    return scripted_inspector({
        FOOBAR: {
            "0.1.0": make_result("Foobar", "Foo"),
            "0.2.0": make_result("Foobar", "Foo", "Bar", "Qux"),
        },
        FOOBAZ: {
            "1.0.0": make_result("Foobaz", "Baz"),
            "1.1.0": ManifestUnreadableError(FOOBAZ, "1.1.0", "no Package.swift"),
            "2.0.0": make_result("Foobaz", "Baz"),
        },
    })


def _args(*argv):
    return build_parser().parse_args(list(argv))


class TestParser:
    def test_defaults(self):
        args = _args("in.json", "out.json")
        assert args.input_path == "in.json"
        assert args.output_path == "out.json"
        assert args.working_directory_path is None
        assert args.revision is None
        assert args.verbose is False

    def test_all_options(self):
        args = _args("in.json", "out.json", "--working-directory-path", "/tmp/wd", "--revision", "4", "--verbose")
        assert args.working_directory_path == "/tmp/wd"
        assert args.revision == 4
        assert args.verbose is True

    @pytest.mark.parametrize("bad", ["0", "-1", "abc"])
    def test_invalid_revision(self, bad):
        with pytest.raises(SystemExit) as exc:
            _args("in.json", "out.json", "--revision", bad)
        assert exc.value.code == 2

    def test_help_usage(self, capsys):
        with pytest.raises(SystemExit):
            main(["--help"])
        out = capsys.readouterr().out
        assert "package-collection-generate" in out
        assert "--working-directory-path" in out


class TestRun:
    def test_generates_collection(self, tmp_path, fixtures_dir, inspector, capsys):
        out = tmp_path / "package-collection.json"
        code = run(_args(str(fixtures_dir / "input.json"), str(out), "--revision", "7", "--verbose"), inspector)

        assert code == 0
        assert f"Package collection saved to {out}" in capsys.readouterr().out

        collection = read_collection(out)
        assert collection.name == "Test Package Collection"
        assert collection.revision == 7
        assert collection.generated_by.name == "Jane Doe"

        foobar, foobaz = collection.packages
        assert foobar.summary == "Package Foobar"
        assert [v.version for v in foobar.versions] == ["0.2.0", "0.1.0"]
        latest = foobar.versions[0]
        assert [t.name for t in latest.targets] == ["Foo", "Qux"]
        assert [p.name for p in latest.products] == ["Qux"]
        # 1.1.0 is the latest 1.x release but its manifest is unreadable
        assert [v.version for v in foobaz.versions] == ["2.0.0"]

    def test_written_file_is_sorted_json(self, tmp_path, fixtures_dir, inspector):
        out = tmp_path / "collection.json"
        run(_args(str(fixtures_dir / "input.json"), str(out)), inspector)
        data = json.loads(out.read_text())
        assert list(data) == sorted(data)
        assert data["formatVersion"] == "1.0"

    def test_malformed_input_writes_nothing(self, tmp_path, inspector):
        src = tmp_path / "input.json"
        src.write_text(json.dumps({"packages": []}))
        out = tmp_path / "out.json"
        assert run(_args(str(src), str(out)), inspector) == 1
        assert not out.exists()
        assert inspector.calls == []

    def test_missing_requested_version_writes_nothing(self, tmp_path, inspector):
        src = tmp_path / "input.json"
        src.write_text(json.dumps({
            "title": "T",
            "packages": [{"url": FOOBAR, "versions": ["0.3.0"]}],
        }))
        out = tmp_path / "out.json"
        assert run(_args(str(src), str(out)), inspector) == 1
        assert not out.exists()

    def test_unwritable_output(self, tmp_path, fixtures_dir, inspector):
        out = tmp_path / "missing-dir" / "out.json"
        assert run(_args(str(fixtures_dir / "input.json"), str(out)), inspector) == 1
