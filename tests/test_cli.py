"""Tests for perch._cli — argument parsing and command dispatch."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from perch._cli import _build_parser, main

from tests.conftest import INDEX_SHOW, write_module


class TestBuildParser:
    """_build_parser — CLI argument parsing."""

    def test_routes_default_args(self) -> None:
        args = _build_parser().parse_args(["routes"])
        assert args.command == "routes"
        assert args.root == "."
        assert args.prefix is None

    def test_routes_with_prefix(self) -> None:
        args = _build_parser().parse_args(["routes", "my-app/", "--prefix", "/v1"])
        assert args.root == "my-app/"
        assert args.prefix == "/v1"

    def test_serve_default_args(self) -> None:
        args = _build_parser().parse_args(["serve"])
        assert args.command == "serve"
        assert args.root == "."
        assert args.host is None
        assert args.port is None
        assert args.debug is None

    def test_serve_all_flags(self) -> None:
        args = _build_parser().parse_args([
            "serve", "my-app/", "--host", "0.0.0.0", "--port", "9000", "--debug",
        ])
        assert args.host == "0.0.0.0"
        assert args.port == 9000
        assert args.debug is True

    def test_no_command_returns_none(self) -> None:
        assert _build_parser().parse_args([]).command is None


class TestMain:
    def test_routes_prints_table(
        self, app_root: Path, api_dir: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        write_module(api_dir, "widgets.py", INDEX_SHOW)
        main(["routes", str(app_root), "--prefix", "/v1/"])
        err = capsys.readouterr().err
        assert "/v1/widgets" in err
        assert "/v1/widgets/:id" in err
        assert "widgets.show()" in err

    def test_routes_error_exits_1(
        self, app_root: Path, api_dir: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        write_module(api_dir, "broken.py", "raise RuntimeError('boom')\n")
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", str(app_root)])
        assert exc_info.value.code == 1
        assert "boom" in capsys.readouterr().err

    def test_serve_dispatch(self) -> None:
        with patch("perch.app.serve") as serve:
            main(["serve", "site", "--port", "9000"])
        serve.assert_called_once_with(root="site", host=None, port=9000, debug=None)

    def test_no_command_prints_help(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
