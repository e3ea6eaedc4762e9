# tests/test_log.py

import datetime

from electra.utils.log import Log


def test_sync_log_writes_daily_file(tmp_path):
    log = Log(log_dir=str(tmp_path))
    log.log_info_sync("startup", "Старт", {"phone": "9876543210", "password": "secret"}, is_console=False)

    now = datetime.datetime.now()
    path = tmp_path / "startup" / f"{now.year}" / f"{now:%m}" / f"{now:%d}.log"
    content = path.read_text(encoding="utf-8")
    assert "startup: Старт" in content
    assert "9876543210" in content
    assert "secret" not in content


def test_sync_log_follows_log_dir(tmp_path):
    first = Log(log_dir=str(tmp_path / "a"))
    second = Log(log_dir=str(tmp_path / "b"))

    first.log_info_sync("orders", "первый", is_console=False)
    second.log_info_sync("orders", "второй", is_console=False)

    now = datetime.datetime.now()
    day = f"orders/{now.year}/{now:%m}/{now:%d}.log"
    first_content = (tmp_path / "a" / day).read_text(encoding="utf-8")
    second_content = (tmp_path / "b" / day).read_text(encoding="utf-8")
    assert "первый" in first_content and "второй" not in first_content
    assert "второй" in second_content


def test_safe_serialize_strips_secrets(tmp_path):
    log = Log(log_dir=str(tmp_path))
    moment = datetime.datetime(2025, 1, 31, 10, 0)

    result = log.safe_serialize({"at": moment, "token": "abc", "items": ({"price": 1.5},)})

    assert result == {"at": "2025-01-31T10:00:00", "items": [{"price": 1.5}]}
