"""Unit tests for input descriptor loading."""

import json

import pytest
from collectiongen.errors import MalformedInputError
from collectiongen.models.input import GeneratorInput, InputPackage
from collectiongen.utils.validate import load_input, load_input_file, validate_input_payload


class TestLoadInputFile:
    def test_fixture(self, fixtures_dir):
        src = load_input_file(fixtures_dir / "input.json")
        assert src == GeneratorInput(
            title="Test Package Collection",
            overview="A few test packages",
            keywords=["swift packages"],
            packages=[
                InputPackage(
                    url="https://package-collection-tests.com/repos/foobar.git",
                    summary="Package Foobar",
                    versions=["0.2.0", "0.1.0"],
                    excluded_products=["Foo"],
                    excluded_targets=["Bar"],
                ),
                InputPackage(url="https://package-collection-tests.com/repos/foobaz.git"),
            ],
            author={"name": "Jane Doe"},
        )

    def test_missing_file(self, tmp_path):
        with pytest.raises(MalformedInputError) as exc:
            load_input_file(tmp_path / "missing.json")
        assert "<file>" in exc.value.message

    def test_invalid_utf8_file(self, tmp_path):
        src = tmp_path / "input.json"
        src.write_bytes(b'{"title": "\xff\xfe", "packages": [{"url": "https://a"}]}')
        with pytest.raises(MalformedInputError) as exc:
            load_input_file(src)
        assert "UTF-8" in exc.value.message

    def test_dump_and_reload(self, fixtures_dir):
        src = load_input_file(fixtures_dir / "input.json")
        again = load_input(src.model_dump_json(by_alias=True, exclude_none=True))
        assert again == src


class TestValidateInputPayload:
    def test_minimal(self):
        src = validate_input_payload({"title": "T", "packages": [{"url": "https://example.com/a.git"}]})
        assert src.packages[0].versions is None
        assert src.author is None

    def test_missing_title_named(self):
        with pytest.raises(MalformedInputError) as exc:
            validate_input_payload({"packages": [{"url": "https://example.com/a.git"}]})
        assert any(e.startswith("title:") for e in exc.value.errors)

    def test_missing_package_url_named(self):
        with pytest.raises(MalformedInputError) as exc:
            validate_input_payload({"title": "T", "packages": [{"url": "https://a"}, {"description": "x"}]})
        assert any(e.startswith("packages.1.url:") for e in exc.value.errors)

    def test_wrong_shape_named(self):
        with pytest.raises(MalformedInputError) as exc:
            validate_input_payload({"title": "T", "packages": [{"url": "https://a", "versions": "1.0.0"}]})
        assert any(e.startswith("packages.0.versions") for e in exc.value.errors)

    def test_root_must_be_object(self):
        with pytest.raises(MalformedInputError):
            validate_input_payload(["not", "an", "object"])

    def test_duplicate_package_urls_rejected(self):
        url = "https://example.com/a.git"
        with pytest.raises(MalformedInputError) as exc:
            validate_input_payload({"title": "T", "packages": [{"url": url}, {"url": url, "versions": ["1.0.0"]}]})
        assert any("duplicate package urls" in e and url in e for e in exc.value.errors)

    @pytest.mark.parametrize("url", ["example.com/a.git", "not a url", "//example.com/a.git"])
    def test_package_url_needs_scheme(self, url):
        with pytest.raises(MalformedInputError) as exc:
            validate_input_payload({"title": "T", "packages": [{"url": url}]})
        assert any(e.startswith("packages.0.url:") for e in exc.value.errors)


class TestLoadInput:
    def test_invalid_json(self):
        with pytest.raises(MalformedInputError) as exc:
            load_input("{not json")
        assert "invalid JSON" in exc.value.message

    def test_bytes_accepted(self):
        payload = json.dumps({"title": "T", "packages": [{"url": "https://a"}]}).encode()
        assert load_input(payload).title == "T"

    def test_invalid_utf8_bytes(self):
        with pytest.raises(MalformedInputError) as exc:
            load_input(b'{"title": "\xff", "packages": [{"url": "https://a"}]}')
        assert "UTF-8" in exc.value.message
