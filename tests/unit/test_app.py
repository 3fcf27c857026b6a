"""
Unit tests for student_manager/app.py — launcher wiring, no Qt event loop.

Coverage plan
─────────────
arg parsing        → 4 tests  (defaults, --db, env override, --debug/--timeout)
build_view_model   → 1 test
main()             → 1 test   (unopenable database → exit code 1)
"""

import pytest


def _parse(args: list[str]):
    """Call the launcher argument parser and return the parsed namespace."""
    from student_manager.app import build_parser
    return build_parser().parse_args(args)


class TestArgParsing:

    def test_defaults(self, monkeypatch):
        from student_manager.app import DB_ENV_VAR, DEFAULT_DB_PATH
        from student_manager.store.db import DEFAULT_TIMEOUT
        monkeypatch.delenv(DB_ENV_VAR, raising=False)
        ns = _parse([])
        assert ns.db == DEFAULT_DB_PATH
        assert ns.timeout == DEFAULT_TIMEOUT
        assert ns.debug is False

    def test_db_flag(self):
        ns = _parse(["--db", "./students.db"])
        assert ns.db == "./students.db"

    def test_env_var_overrides_default_db(self, monkeypatch):
        from student_manager.app import DB_ENV_VAR
        monkeypatch.setenv(DB_ENV_VAR, "/tmp/env.db")
        assert _parse([]).db == "/tmp/env.db"

    def test_debug_and_timeout_flags(self):
        ns = _parse(["--debug", "--timeout", "0.5"])
        assert ns.debug is True
        assert ns.timeout == 0.5


class TestBuildViewModel:

    def test_view_model_reads_from_given_store(self, tmp_path):
        from student_manager.app import build_view_model
        from student_manager.store.db import StudentStore
        from student_manager.store.models import StudentRecord
        store = StudentStore(db_path=str(tmp_path / "app.db"))
        store.insert(StudentRecord(name="Ann"))
        vm = build_view_model(store)
        try:
            sub = vm.subscribe()
            snapshot = sub.get(timeout=2)
            while not snapshot:
                snapshot = sub.get(timeout=2)
            assert [r.name for r in snapshot] == ["Ann"]
        finally:
            vm.close()
            store.close()


class TestMain:

    def test_unopenable_database_returns_1(self, tmp_path, capsys):
        from student_manager.app import main
        # A directory cannot be opened as a database file
        bad = tmp_path / "is_a_dir.db"
        bad.mkdir()
        assert main(["--db", str(bad)]) == 1
        assert "Error" in capsys.readouterr().err
