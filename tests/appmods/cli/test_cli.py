"""
Tests for the appmods command line interface.
"""

from io import StringIO

import pytest
from rich.console import Console

from appmods.app import ShutdownCoordinator
from appmods.cli.cli import main

YAML = """\
app:
  name: cli-app
  logging:
    level: warning
stamp:
  stop_timeout_ms: 300
  color: blue
"""

STAMP = """
    import asyncio
    import os
    import signal

    from appmods import Module


    class Stamp(Module):
        def set_cli(self, parser):
            parser.add_argument("--label", default="none")

        async def start(self):
            self.lg.warning("label", extra={"label": self.app.args.label})
            asyncio.get_running_loop().call_later(0.05, os.kill, os.getpid(), signal.SIGTERM)
"""


@pytest.fixture(autouse=True)
def no_active_coordinator():
    yield
    ShutdownCoordinator._active = None


@pytest.fixture
def project(srcdir, write_module, temp_dir):
    write_module("stamp.py", STAMP)
    conf = temp_dir / "app.yaml"
    conf.write_text(YAML)
    return srcdir, conf


@pytest.fixture
def console():
    return Console(file=StringIO(), width=200)


@pytest.mark.integration
class TestModulesCommand:
    """Test `appmods modules`."""

    def test_lists_modules(self, project, console):
        srcdir, conf = project

        code = main(["modules", str(srcdir), "-c", str(conf)], console=console)

        out = console.file.getvalue()
        assert code == 0
        assert "stamp" in out
        assert "Stamp" in out
        assert "300 ms" in out
        assert "color, stop_timeout_ms" in out

    def test_zero_stop_timeout_shown(self, project, temp_dir, console):
        srcdir, _ = project
        conf = temp_dir / "zero.yaml"
        conf.write_text("app:\n  name: cli-app\nstamp:\n  stop_timeout_ms: 0\n")

        code = main(["modules", str(srcdir), "-c", str(conf)], console=console)

        out = console.file.getvalue()
        assert code == 0
        assert "0 ms" in out
        assert "2000 ms" not in out

    def test_missing_config_reports_error(self, temp_dir, console):
        code = main(
            ["modules", str(temp_dir), "-c", str(temp_dir / "nope.yaml")], console=console
        )

        assert code == 1
        assert "error:" in console.file.getvalue()

    def test_unknown_module_reports_error(self, srcdir, temp_dir, console):
        conf = temp_dir / "app.yaml"
        conf.write_text("app:\n  name: x\nghost: {}\n")

        code = main(["modules", str(srcdir), "-c", str(conf)], console=console)

        assert code == 1
        assert "ghost" in console.file.getvalue()


@pytest.mark.integration
class TestRunCommand:
    """Test `appmods run`."""

    def test_runs_until_signal(self, project, console, capsys):
        srcdir, conf = project

        code = main(
            ["run", str(srcdir), "-c", str(conf), "--", "--label", "blue"],
            console=console,
        )

        assert code == 0
        assert "[label:blue]" in capsys.readouterr().out

    def test_start_failure_exits_nonzero(self, srcdir, write_module, temp_dir, console, capsys):
        write_module(
            "bad.py",
            """
            from appmods import Module

            class Bad(Module):
                def start(self):
                    raise RuntimeError("no")
            """,
        )
        conf = temp_dir / "app.yaml"
        conf.write_text("app:\n  name: x\nbad: {}\n")

        code = main(["run", str(srcdir), "-c", str(conf)], console=console)

        assert code == 1
        assert "app error" in capsys.readouterr().err

    def test_requires_subcommand(self):
        with pytest.raises(SystemExit):
            main([])
