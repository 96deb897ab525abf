from datetime import datetime, timedelta, timezone

from mtgreport.timer import Timer


def test_now_formats_fixed_clock():
    timer = Timer(clock=lambda: datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
    assert timer.now() == "2024-01-02 03:04:05"


def test_now_converts_to_utc():
    offset = timezone(timedelta(hours=2))
    timer = Timer(clock=lambda: datetime(2024, 1, 2, 3, 4, 5, tzinfo=offset))
    assert timer.now() == "2024-01-02 01:04:05"


def test_now_uses_real_clock():
    before = datetime.now(timezone.utc).replace(microsecond=0)
    text = Timer().now()
    after = datetime.now(timezone.utc)
    parsed = datetime.strptime(text, "%Y-%m-%d %H:%M:%S").replace(tzinfo=timezone.utc)
    assert before <= parsed <= after