"""Tests for warren._cli — argument parsing and command dispatch."""

from __future__ import annotations

from pathlib import Path

import pytest

from warren._cli import _build_parser, main

from .conftest import HOME_PAGE, USERS_ROUTE, write_route


class TestBuildParser:
    """_build_parser — CLI argument parsing."""

    def test_routes_default_args(self) -> None:
        args = _build_parser().parse_args(["routes"])
        assert args.command == "routes"
        assert args.root == "routes"
        assert args.pattern is None
        assert args.pattern_regex is None
        assert args.export is None
        assert args.warn_missing_exports is False

    def test_routes_template_flags(self) -> None:
        args = _build_parser().parse_args([
            "routes", "site/routes",
            "--pattern-regex", r"(.+)\.md",
            "--export", "html",
            "--warn-missing-exports",
        ])
        assert args.root == "site/routes"
        assert args.pattern_regex == r"(.+)\.md"
        assert args.export == "html"
        assert args.warn_missing_exports is True

    def test_serve_default_args(self) -> None:
        args = _build_parser().parse_args(["serve"])
        assert args.command == "serve"
        assert args.host == "127.0.0.1"
        assert args.port == 8000

    def test_serve_custom_bind(self) -> None:
        args = _build_parser().parse_args(["serve", "--host", "0.0.0.0", "--port", "9000"])
        assert args.host == "0.0.0.0"
        assert args.port == 9000

    def test_no_command_returns_none(self) -> None:
        assert _build_parser().parse_args([]).command is None

    def test_verbose_flag(self) -> None:
        assert _build_parser().parse_args(["-v", "routes"]).verbose is True


class TestRoutesCommand:
    """warren routes — prints the discovered route table."""

    def test_prints_table(
        self, routes_dir: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(routes_dir.parent)
        write_route(routes_dir, "page.py", HOME_PAGE)
        write_route(routes_dir, "users/route.py", USERS_ROUTE)

        main(["routes", str(routes_dir)])

        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["METHOD", "PATH", "SOURCE"]
        rows = [line.split()[:2] for line in lines[2:]]
        assert rows == [["GET", "/"], ["GET", "/users"], ["POST", "/users"]]

    def test_empty_tree(
        self, routes_dir: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(routes_dir.parent)
        main(["routes", str(routes_dir)])
        assert "No routes discovered." in capsys.readouterr().out

    def test_template_pattern_flag(
        self, routes_dir: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(routes_dir.parent)
        write_route(routes_dir, "docs/intro.md", "# Intro\n")
        main(["routes", str(routes_dir), "--pattern-regex", r"(.+)\.md"])
        out = capsys.readouterr().out
        assert "/docs" in out

    def test_error_exits_nonzero(
        self, routes_dir: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(routes_dir.parent)
        write_route(routes_dir, "users/route.py", USERS_ROUTE)
        write_route(routes_dir, "users/page.py", HOME_PAGE)

        with pytest.raises(SystemExit) as exc_info:
            main(["routes", str(routes_dir)])
        assert exc_info.value.code == 1
        assert "Error: Conflicting route files" in capsys.readouterr().err

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "warren" in capsys.readouterr().out
