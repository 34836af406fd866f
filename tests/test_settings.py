import pytest

from src.app.settings import Settings, SettingsError, resolve_settings


def test_defaults():
    s = resolve_settings(argv=[], environ={})
    assert s == Settings()
    assert (s.rows, s.cols, s.cell_mm) == (25, 40, 1.0)


def test_environment_overrides_defaults():
    s = resolve_settings(argv=[], environ={
        "CREEPAGE_ROWS": "10",
        "CREEPAGE_COLS": "12",
        "CREEPAGE_CELL_MM": "0.25",
        "CREEPAGE_PRESET": "trace_fence",
        "CREEPAGE_THEME": "Midnight",
        "CREEPAGE_LOG_LEVEL": "debug",
    })
    assert s == Settings(rows=10, cols=12, cell_mm=0.25, preset="trace_fence",
                         theme="midnight", log_level="DEBUG")


def test_flags_win_over_environment():
    s = resolve_settings(argv=["--cell-mm=2", "--preset=slot_barrier", "--other"],
                         environ={"CREEPAGE_CELL_MM": "0.5"})
    assert s.cell_mm == 2.0
    assert s.preset == "slot_barrier"


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("CREEPAGE_ROWS", "7")
    assert resolve_settings(argv=[]).rows == 7


@pytest.mark.parametrize("argv", [
    ["--rows=0"],
    ["--cols=abc"],
    ["--cell-mm=-1"],
    ["--cell-mm=wide"],
    ["--preset=spiral"],
    ["--theme=neon"],
    ["--log-level=chatty"],
])
def test_invalid_values_raise(argv):
    with pytest.raises(SettingsError):
        resolve_settings(argv=argv, environ={})
