"""Tests for event-card time badges."""
from datetime import datetime, timedelta, timezone

from matty.services.time_badge import BadgeStyle, badge_style, format_event_date, time_until

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class TestTimeUntil:
    def test_undated_is_now(self):
        assert time_until(None, NOW) == "Now"

    def test_under_a_minute_and_past_show_one_minute(self):
        assert time_until(NOW + timedelta(seconds=30), NOW) == "1m"
        assert time_until(NOW - timedelta(hours=2), NOW) == "1m"

    def test_minutes_hours_days_years(self):
        assert time_until(NOW + timedelta(minutes=15, seconds=59), NOW) == "15m"
        assert time_until(NOW + timedelta(minutes=59), NOW) == "59m"
        assert time_until(NOW + timedelta(hours=1), NOW) == "1h"
        assert time_until(NOW + timedelta(hours=23, minutes=59), NOW) == "23h"
        assert time_until(NOW + timedelta(hours=49), NOW) == "2d"
        assert time_until(NOW + timedelta(days=364), NOW) == "364d"
        assert time_until(NOW + timedelta(days=800), NOW) == "2y"


class TestBadgeStyle:
    def test_styles(self):
        assert badge_style(None, NOW) == BadgeStyle.now
        assert badge_style(NOW + timedelta(hours=23), NOW) == BadgeStyle.soon
        assert badge_style(NOW - timedelta(hours=1), NOW) == BadgeStyle.soon
        assert badge_style(NOW + timedelta(hours=24), NOW) == BadgeStyle.later


class TestFormatEventDate:
    def test_local_date(self):
        late_evening_utc = datetime(2026, 10, 19, 23, 30, tzinfo=timezone.utc)
        assert format_event_date(late_evening_utc, "UTC") == "Oct 19, 2026"
        assert format_event_date(late_evening_utc, "Europe/Moscow") == "Oct 20, 2026"
        assert format_event_date(late_evening_utc, "America/New_York") == "Oct 19, 2026"

    def test_naive_treated_as_utc(self):
        assert format_event_date(datetime(2026, 1, 5, 1, 0), "America/Los_Angeles") == "Jan 4, 2026"

    def test_undated(self):
        assert format_event_date(None, "UTC") == ""
