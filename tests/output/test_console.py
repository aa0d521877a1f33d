"""Tests for the Rich console factory."""

from __future__ import annotations

from rememberme.output.console import create_console, get_output, style_for_action, style_for_bucket


class TestConsole:
    def test_renders_to_buffer(self) -> None:
        console = create_console(no_color=True)
        console.print("[rm.ok]hello[/rm.ok]")
        assert get_output(console) == "hello\n"

    def test_bucket_styles(self) -> None:
        assert style_for_bucket("dying") == "rm.bucket.dying"
        assert style_for_bucket("mystery") == ""

    def test_action_styles(self) -> None:
        assert style_for_action("adopt") == "rm.action.adopt"
        assert style_for_action("mystery") == ""
