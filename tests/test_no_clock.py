from pathlib import Path

from tools.check_no_clock import find_clock_usage, main

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def test_project_has_no_direct_clock_reads() -> None:
    assert find_clock_usage(PROJECT_ROOT) == []


def test_checker_flags_clock_reads(tmp_path) -> None:
    pkg = tmp_path / "trades"
    pkg.mkdir()
    (pkg / "replay.py").write_text("import time\nstamp = time.time()\n", encoding="utf-8")
    (tmp_path / "trade_time.py").write_text("x = datetime.now()\n", encoding="utf-8")

    hits = find_clock_usage(tmp_path)
    assert [(str(rel), ln) for rel, ln, _line, _pat in hits] == [(str(Path("trades") / "replay.py"), 2)]


def test_main_reports_clean_tree(capsys) -> None:
    assert main() == 0
    assert "[OK]" in capsys.readouterr().out
