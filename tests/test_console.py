import io
import threading

import pytest

from coding_agent.console import Console


class TestSpinner:

    def test_stopped_after_success(self):
        out = io.StringIO()
        console = Console(out=out, animate=True)
        with console.spinner("Working", interval=0.01):
            pass
        assert out.getvalue().endswith("Working\n")
        assert "✓" in out.getvalue()
        assert not any(t.name == "console-spinner" for t in threading.enumerate())

    def test_stopped_after_failure(self):
        out = io.StringIO()
        console = Console(out=out, animate=True)
        with pytest.raises(RuntimeError):
            with console.spinner("Working", interval=0.01):
                raise RuntimeError("boom")
        assert "✗" in out.getvalue()
        assert not any(t.name == "console-spinner" for t in threading.enumerate())

    def test_disabled_when_not_animated(self):
        out = io.StringIO()
        with Console(out=out, animate=False).spinner("Working"):
            pass
        assert out.getvalue() == ""

    def test_not_animated_for_non_tty_by_default(self):
        assert Console(out=io.StringIO()).animate is False


class TestConfirm:

    @pytest.mark.parametrize("answer,expected", [("y", True), (" Yes ", True), ("no", False), ("", False)])
    def test_answers(self, answer, expected):
        console = Console(input_func=lambda prompt: answer, out=io.StringIO())
        assert console.confirm("Apply?") is expected
