#!/usr/bin/env python3

import click
import pytest

from restspec_to_code.cli_utils import reconstruct_command_line
from restspec_to_code.restspec_to_code import restspec_to_code


class TestCliUtils:
    """Test cases for CLI utilities"""

    def test_reconstruct_command_line_without_context(self):
        """Test command reconstruction without active Click context (fallback)"""
        result = reconstruct_command_line(restspec_to_code)
        assert result == "restspec_to_code"

    def test_reconstruct_command_line_with_context(self):
        """Arguments come first, then non-default options"""
        ctx = click.Context(restspec_to_code)
        ctx.params = {
            "config": None,
            "schema_paths": (),
            "namespace": "com.example",
            "force": True,
            "verbose": False,
            "target_dir": "/nonexistent/generated",
            "sources": ("/nonexistent/a.restspec.json", "/nonexistent/b.restspec.json"),
        }
        with ctx:
            result = reconstruct_command_line(restspec_to_code)

        assert result == (
            "restspec_to_code /nonexistent/generated /nonexistent/a.restspec.json /nonexistent/b.restspec.json "
            "--namespace com.example --force"
        )

    def test_existing_paths_are_shortened(self, tmp_path):
        source = tmp_path / "widget.restspec.json"
        source.write_text("{}")
        ctx = click.Context(restspec_to_code)
        ctx.params = {"target_dir": str(tmp_path), "sources": (str(source),)}
        with ctx:
            result = reconstruct_command_line(restspec_to_code)

        assert result == f"restspec_to_code {tmp_path.name} widget.restspec.json"


if __name__ == "__main__":
    pytest.main([__file__])
