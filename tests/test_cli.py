"""Tests for the modelwalker command line."""

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner
from rich.console import Console

from modelwalker import cli
from modelwalker.cli import main
from modelwalker.domain.execution_event import ExecutionEventType
from modelwalker.domain.models import NodeStatus
from modelwalker.infrastructure.persistence import (
    FilesystemExecutionEventStore,
    FilesystemNodeStatusStore,
)

SHOP_MODULE = textwrap.dedent(
    """
    from modelwalker import Edge, Model, Vertex


    def build():
        home, cart = Vertex(id="home", name="v_Home"), Vertex(id="cart", name="v_Cart")
        return (
            Model()
            .add_edge(Edge(id="open", name="e_Open", target_vertex=home))
            .add_edge(Edge(id="add", name="e_Add", source_vertex=home, target_vertex=cart))
        )


    class BrokenCart:
        def v_Cart(self):
            raise RuntimeError("cart is empty")
    """
)


@pytest.fixture(autouse=True)
def plain_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Render without colour so output can be matched as text."""
    monkeypatch.setattr(cli, "console", Console(color_system=None, width=200))


@pytest.fixture
def shop_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Write an importable module holding a model factory and a test object."""
    (tmp_path / "shop_model.py").write_text(SHOP_MODULE)
    monkeypatch.syspath_prepend(str(tmp_path))
    return "shop_model"


class TestRunCommand:
    """Tests for `modelwalker run`."""

    def test_run_saves_statuses_and_trace(self, tmp_path: Path, shop_module: str) -> None:
        base_dir = tmp_path / "out"

        result = CliRunner().invoke(
            main, ["run", f"{shop_module}:build", str(base_dir)]
        )

        assert result.exit_code == 0, result.output
        assert "completed" in result.output
        snapshot = FilesystemNodeStatusStore(base_dir).load("default")
        assert set(snapshot.values()) == {NodeStatus.COVERED}
        events = FilesystemExecutionEventStore(base_dir).get_events("default")
        assert events[-1].event_type is ExecutionEventType.COMPLETED

    def test_run_with_config_and_failing_implementation(
        self, tmp_path: Path, shop_module: str
    ) -> None:
        base_dir = tmp_path / "out"
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"strategy": "TryAgainStrategy", "session_id": "t"}))

        result = CliRunner().invoke(
            main,
            [
                "run",
                f"{shop_module}:build",
                str(base_dir),
                "--config",
                str(config),
                "--implementation",
                f"{shop_module}:BrokenCart",
            ],
        )

        assert result.exit_code == 1
        assert "cart is empty" in result.output
        assert FilesystemNodeStatusStore(base_dir).load("t")["cart"] is NodeStatus.FAILED

    def test_factory_must_name_attribute(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(main, ["run", "shop_model", str(tmp_path)])

        assert result.exit_code != 0
        assert "module:attribute" in result.output


class TestReportCommand:
    """Tests for `modelwalker report`."""

    def test_shows_coverage(self, tmp_path: Path) -> None:
        FilesystemNodeStatusStore(tmp_path).save(
            "s1",
            {
                "vA": NodeStatus.COVERED,
                "vB": NodeStatus.FAILED,
                "vC": NodeStatus.NOT_REACHABLE,
            },
        )

        result = CliRunner().invoke(main, ["report", str(tmp_path), "--session", "s1"])

        assert result.exit_code == 0
        assert "Raw coverage: 33%" in result.output
        assert "Reachable coverage: 50%" in result.output

    def test_missing_session(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(main, ["report", str(tmp_path), "--session", "x"])

        assert result.exit_code != 0
        assert "No status snapshot" in result.output


class TestTraceCommand:
    """Tests for `modelwalker trace`."""

    def test_no_events(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(main, ["trace", str(tmp_path)])

        assert result.exit_code == 0
        assert "No events for session default" in result.output

    def test_timeline(self, tmp_path: Path, shop_module: str) -> None:
        base_dir = tmp_path / "out"
        CliRunner().invoke(main, ["run", f"{shop_module}:build", str(base_dir)])

        result = CliRunner().invoke(
            main, ["trace", str(base_dir), "--format", "timeline"]
        )

        assert result.exit_code == 0
        assert "[+] e_Open" in result.output
        assert "[=]" in result.output

    def test_failures_only(self, tmp_path: Path, shop_module: str) -> None:
        base_dir = tmp_path / "out"
        CliRunner().invoke(
            main,
            [
                "run",
                f"{shop_module}:build",
                str(base_dir),
                "--implementation",
                f"{shop_module}:BrokenCart",
            ],
        )

        result = CliRunner().invoke(
            main, ["trace", str(base_dir), "--failures", "--format", "timeline"]
        )

        assert result.exit_code == 0
        assert "[-] v_Cart: " in result.output
        assert "[!] v_Cart" in result.output
        assert "[+]" not in result.output

    def test_single_element(self, tmp_path: Path, shop_module: str) -> None:
        base_dir = tmp_path / "out"
        CliRunner().invoke(main, ["run", f"{shop_module}:build", str(base_dir)])

        result = CliRunner().invoke(
            main, ["trace", str(base_dir), "--element", "home", "--format", "timeline"]
        )

        assert result.exit_code == 0
        assert "[+] v_Home" in result.output
        assert "e_Open" not in result.output
        assert "v_Cart" not in result.output

    def test_failures_and_element_are_exclusive(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(
            main, ["trace", str(tmp_path), "--failures", "--element", "home"]
        )

        assert result.exit_code != 0
        assert "cannot be combined" in result.output
