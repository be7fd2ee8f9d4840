"""Tests for CLI argument parsing, exit codes, and file handling."""

from __future__ import annotations

from pathlib import Path

from minicalc.cli import build_parser, main


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text)
    return path


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


class TestBuildParser:
    def test_input_only(self) -> None:
        ns = build_parser().parse_args(["prog.calc"])
        assert ns.inputs == ["prog.calc"]
        assert ns.output is None
        assert ns.tokens is False
        assert ns.table is False

    def test_unset_flags_are_none(self) -> None:
        ns = build_parser().parse_args(["prog.calc"])
        assert ns.trace is None
        assert ns.fresh is None
        assert ns.keep_comments is None
        assert ns.stop_on_error is None

    def test_multiple_inputs_and_flags(self) -> None:
        ns = build_parser().parse_args(
            ["a.calc", "b.calc", "-o", "out.txt", "--fresh", "--trace", "--config", "x.toml"]
        )
        assert ns.inputs == ["a.calc", "b.calc"]
        assert ns.output == "out.txt"
        assert ns.fresh is True
        assert ns.trace is True
        assert ns.config == "x.toml"


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_success(self, tmp_path: Path, capsys) -> None:
        prog = _write(tmp_path, "ok.calc", "PRINT(1 + 1);\n")
        assert main([str(prog)]) == 0
        assert capsys.readouterr().out == "2.0"

    def test_syntax_error_returns_1(self, tmp_path: Path, capsys) -> None:
        prog = _write(tmp_path, "bad.calc", "x = ;\n")
        assert main([str(prog)]) == 1
        err = capsys.readouterr().err
        assert "error[D4]: expected variable or literal" in err
        assert f"--> {prog}:1:5" in err

    def test_lexical_error_returns_1(self, tmp_path: Path, capsys) -> None:
        prog = _write(tmp_path, "lex.calc", "x = 1 $;\n")
        assert main([str(prog)]) == 1
        assert "error[T1]" in capsys.readouterr().err

    def test_eval_error_returns_2(self, tmp_path: Path, capsys) -> None:
        prog = _write(tmp_path, "div.calc", "x = 1 / 0;\n")
        assert main([str(prog)]) == 2
        assert "error[F4]" in capsys.readouterr().err

    def test_missing_file_returns_2(self, tmp_path: Path, capsys) -> None:
        assert main([str(tmp_path / "nope.calc")]) == 2
        assert capsys.readouterr().err.startswith("error: ")

    def test_invalid_config_returns_2(self, tmp_path: Path, capsys) -> None:
        _write(tmp_path, "minicalc.toml", "[run\n")
        prog = _write(tmp_path, "ok.calc", "x = 1;\n")
        assert main([str(prog)]) == 2
        assert "invalid config" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Running programs
# ---------------------------------------------------------------------------


class TestRun:
    def test_output_file(self, tmp_path: Path, capsys) -> None:
        prog = _write(tmp_path, "p.calc", "PRINT('hi' * 2);\n")
        out = tmp_path / "out.txt"
        assert main([str(prog), "-o", str(out)]) == 0
        assert out.read_text() == "hihi"
        assert capsys.readouterr().out == ""

    def test_files_share_bindings(self, tmp_path: Path, capsys) -> None:
        a = _write(tmp_path, "a.calc", "a = 2;\n")
        b = _write(tmp_path, "b.calc", "PRINT(a * 3);\n")
        assert main([str(a), str(b)]) == 0
        assert capsys.readouterr().out == "6.0"

    def test_fresh_isolates_files(self, tmp_path: Path, capsys) -> None:
        a = _write(tmp_path, "a.calc", "a = 2;\n")
        b = _write(tmp_path, "b.calc", "PRINT(a * 3);\n")
        assert main([str(a), str(b), "--fresh"]) == 0
        assert capsys.readouterr().out == "0.0"

    def test_errors_reported_per_file(self, tmp_path: Path, capsys) -> None:
        a = _write(tmp_path, "a.calc", "a = 1;\n")
        b = _write(tmp_path, "b.calc", "b = ;\n")
        assert main([str(a), str(b)]) == 1
        err = capsys.readouterr().err
        assert f"--> {b}:1:5" in err
        assert str(a) not in err

    def test_trace(self, tmp_path: Path, capsys) -> None:
        prog = _write(tmp_path, "t.calc", "IF(1 == 1) x = 2;\n")
        assert main([str(prog), "--trace"]) == 0
        assert "condition met, computation performed (x = 2.00)" in capsys.readouterr().err

    def test_table(self, tmp_path: Path, capsys) -> None:
        prog = _write(tmp_path, "t.calc", "x = 1;\n")
        assert main([str(prog), "--table"]) == 0
        assert "Created tokenizer:" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Token listing
# ---------------------------------------------------------------------------


class TestTokens:
    def test_listing(self, tmp_path: Path, capsys) -> None:
        prog = _write(tmp_path, "p.calc", "x = 1;\n")
        assert main([str(prog), "--tokens"]) == 0
        assert capsys.readouterr().out == "IDENT\tx\nASSIGNMENT\t=\nNUMBER\t1\nSEMICOLON\t;\n"

    def test_listing_does_not_run(self, tmp_path: Path, capsys) -> None:
        prog = _write(tmp_path, "p.calc", "x = ;\n")
        assert main([str(prog), "--tokens"]) == 0
        assert capsys.readouterr().err == ""

    def test_keep_comments(self, tmp_path: Path, capsys) -> None:
        prog = _write(tmp_path, "p.calc", "# note\nx\n")
        assert main([str(prog), "--tokens", "--keep-comments"]) == 0
        assert capsys.readouterr().out == "COMMENT\t# note\nIDENT\tx\n"

    def test_comments_hidden(self, tmp_path: Path, capsys) -> None:
        prog = _write(tmp_path, "p.calc", "# note\nx\n")
        assert main([str(prog), "--tokens"]) == 0
        assert capsys.readouterr().out == "IDENT\tx\n"

    def test_errors_listed(self, tmp_path: Path, capsys) -> None:
        prog = _write(tmp_path, "p.calc", "x $ y")
        assert main([str(prog), "--tokens"]) == 0
        assert capsys.readouterr().out == "IDENT\tx\nERROR\t$\nIDENT\ty\n"

    def test_stop_on_error(self, tmp_path: Path, capsys) -> None:
        prog = _write(tmp_path, "p.calc", "x $ y")
        assert main([str(prog), "--tokens", "--stop-on-error"]) == 0
        assert capsys.readouterr().out == "IDENT\tx\n"
