"""Database helpers against a throwaway SQLite file."""

from sqlalchemy import inspect

from database import check_connection, connect_to_db, init_db, make_engine


def test_init_db_creates_products_table(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'a.db'}")
    init_db(engine)
    assert "products" in inspect(engine).get_table_names()
    engine.dispose()


def test_check_connection_reports_dialect(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'b.db'}")
    assert check_connection(engine).startswith("sqlite")
    engine.dispose()


def test_connect_to_db_success(tmp_path, capsys):
    assert connect_to_db(f"sqlite:///{tmp_path / 'c.db'}") is True
    out = capsys.readouterr().out
    assert "Connected" in out
    assert "Connection closed" in out


def test_connect_to_db_failure(tmp_path, capsys):
    # parent directory does not exist, so SQLite cannot open the file
    url = f"sqlite:///{tmp_path / 'missing' / 'd.db'}"
    assert connect_to_db(url) is False
    assert "failed" in capsys.readouterr().out
