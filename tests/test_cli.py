"""Tests for the lexgen command line."""

import io
import json

import pytest

from lexgen.main import create_parser, main


@pytest.fixture
def record_file(tmp_path, record_lexicon):
    path = tmp_path / "com.example.post.json"
    path.write_text(json.dumps(record_lexicon), encoding="utf-8")
    return path


@pytest.fixture
def broken_file(tmp_path, make_document):
    path = tmp_path / "broken.json"
    path.write_text(json.dumps(make_document({"X": {"type": "widget"}})))
    return path


class TestParser:
    def test_defaults(self):
        args = create_parser().parse_args(["a.json"])

        assert args.sources == ["a.json"]
        assert args.language == "rust"
        assert args.verbose == 0
        assert args.config is None

    def test_options_override_alias(self):
        args = create_parser().parse_args(["--options-override", "o.yaml", "-vv"])

        assert args.config == "o.yaml"
        assert args.verbose == 2


class TestGenerate:
    def test_single_file_to_stdout(self, lexicon_file, capsys):
        assert main([str(lexicon_file)]) == 0

        out, err = capsys.readouterr()
        assert out.startswith("/// A user profile.\n")
        assert "pub struct ProfileAddress {" in out
        assert out.endswith("/* Status: token - not generated */\n")
        assert "unsupported_construct" in err

    def test_sources_in_order(self, lexicon_file, record_file, capsys):
        assert main([str(record_file), str(lexicon_file)]) == 0

        out, _ = capsys.readouterr()
        assert out.index("/* main: record") < out.index("pub struct Profile {")

    def test_output_file(self, lexicon_file, tmp_path, capsys):
        target = tmp_path / "out" / "lexicons.rs"
        target.parent.mkdir()

        assert main([str(lexicon_file), "-o", str(target)]) == 0

        out, err = capsys.readouterr()
        assert out == ""
        assert target.read_text(encoding="utf-8").startswith("/// A user profile.")
        assert "saved to" in err

    def test_generation_flags(self, record_file, capsys):
        argv = [str(record_file), "--prelude", "--expand-records", "--skip-none"]
        assert main(argv + ["--field-case", "snake"]) == 0

        out, _ = capsys.readouterr()
        assert out.startswith("// Code generated by lexgen from com.example.post.")
        assert '#[serde(rename = "createdAt")]\n    pub created_at: String,' in out
        assert 'skip_serializing_if = "Option::is_none"' in out

    def test_no_comments(self, lexicon_file, capsys):
        assert main([str(lexicon_file), "--no-comments"]) == 0
        assert "///" not in capsys.readouterr().out

    def test_options_override_file(self, record_file, tmp_path, capsys):
        options = tmp_path / "options.yaml"
        options.write_text("expand_records: true\nint_type: u64\n")

        assert main([str(record_file), "--options-override", str(options)]) == 0
        assert "pub struct main {" in capsys.readouterr().out

    def test_stdin(self, monkeypatch, profile_lexicon, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(profile_lexicon)))

        assert main(["--stdin"]) == 0
        assert "pub struct Profile {" in capsys.readouterr().out

    def test_alias_language(self, lexicon_file, capsys):
        assert main([str(lexicon_file), "-l", "rs"]) == 0
        assert "pub struct Profile {" in capsys.readouterr().out

    def test_verbose_logs_reading(self, lexicon_file, capsys):
        assert main([str(lexicon_file), "-v"]) == 0
        assert "Reading" in capsys.readouterr().err


class TestFailures:
    def test_missing_file_still_generates_others(
        self, lexicon_file, tmp_path, capsys
    ):
        missing = tmp_path / "missing.json"

        assert main([str(missing), str(lexicon_file)]) == 1

        out, err = capsys.readouterr()
        assert "pub struct Profile {" in out
        assert "Failed to load" in err

    def test_malformed_document(self, broken_file, record_file, capsys):
        assert main([str(broken_file), str(record_file)]) == 1

        out, err = capsys.readouterr()
        assert "/* main: record - not generated */" in out
        assert "unknown type" in err

    def test_invalid_utf8_file_still_generates_others(
        self, lexicon_file, tmp_path, capsys
    ):
        bad = tmp_path / "bad.json"
        bad.write_bytes(b"\xff")

        assert main([str(bad), str(lexicon_file)]) == 1

        out, err = capsys.readouterr()
        assert "pub struct Profile {" in out
        assert "not valid UTF-8" in err

    def test_no_sources(self, capsys):
        assert main([]) == 1
        assert "Input source required" in capsys.readouterr().err

    def test_unsupported_language(self, lexicon_file, capsys):
        assert main([str(lexicon_file), "-l", "cobol"]) == 1
        assert "Unsupported language" in capsys.readouterr().err

    def test_bad_options_file(self, lexicon_file, tmp_path, capsys):
        options = tmp_path / "options.yaml"
        options.write_text("- not\n- a mapping\n")

        assert main([str(lexicon_file), "--config", str(options)]) == 1
        assert "Configuration error" in capsys.readouterr().err


class TestInformation:
    def test_list_languages(self, capsys):
        assert main(["--list-languages"]) == 0
        assert "rust" in capsys.readouterr().out

    def test_show_config(self, capsys):
        assert main(["--show-config", "--expand-records"]) == 0

        out = capsys.readouterr().out
        assert "expand_records" in out
        assert "True" in out
