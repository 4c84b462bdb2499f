# src/e2e/test_cli.py

import json
from pathlib import Path
import pytest

from spellcore.__main__ import main


def _seed(tmp: Path) -> str:
    f = tmp / "freq.txt"
    f.write_text("hello 1000\nhelp 100\nworld 500\n", encoding="utf-8")
    return str(f)


@pytest.mark.e2e
def test_cli_build_query_json(tmp_path: Path, capsys):
    rc = main(["--build", "--dict", _seed(tmp_path), "--q", "hellp", "--json"])
    assert rc == 0
    rows = json.loads(capsys.readouterr().out)
    assert rows[0] == {"term": "hello", "distance": 1, "frequency": 1000}
    assert {r["term"] for r in rows} == {"hello", "help"}


@pytest.mark.e2e
def test_cli_table_and_empty_result(tmp_path: Path, capsys):
    rc = main(["--build", "--dict", _seed(tmp_path), "--q", "zzzzzz", "--verbosity", "top"])
    assert rc == 0
    assert "(no suggestions)" in capsys.readouterr().out


@pytest.mark.e2e
def test_cli_load_sqlite(tmp_path: Path, capsys):
    db = tmp_path / "d.sqlite"
    assert main(["--build", "--dict", _seed(tmp_path), "--db", f"sqlite:///{db}"]) == 0
    capsys.readouterr()
    assert main(["--load", "--db", f"sqlite:///{db}", "--q", "wrld", "--max-distance", "1"]) == 0
    out = capsys.readouterr().out
    assert "world" in out


def test_cli_argument_errors(tmp_path: Path):
    with pytest.raises(SystemExit) as ei:
        main(["--load"])
    assert ei.value.code == 2
    with pytest.raises(SystemExit):
        main(["--build"])
    with pytest.raises(SystemExit):
        main(["--build", "--dict", _seed(tmp_path), "--edit-distance", "9"])


def test_cli_missing_dict_path_exits_and_closes_store(tmp_path: Path, monkeypatch, capsys):
    from spellcore.DB.sqlite_store import SQLiteStore

    closed = []
    original_close = SQLiteStore.close

    def tracking_close(self):
        closed.append(self)
        original_close(self)

    monkeypatch.setattr(SQLiteStore, "close", tracking_close)
    missing = tmp_path / "missing" / "nope.txt"
    with pytest.raises(SystemExit) as ei:
        main(["--build", "--dict", str(missing), "--db", f"sqlite:///{tmp_path / 'd.sqlite'}"])
    assert ei.value.code == 2
    assert "nope.txt" in capsys.readouterr().err
    assert len(closed) == 1


def test_cli_unknown_dsn_is_reported(tmp_path: Path, capsys):
    with pytest.raises(SystemExit) as ei:
        main(["--load", "--db", "postgres://nowhere"])
    assert ei.value.code == 2
    assert capsys.readouterr().err
