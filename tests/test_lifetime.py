# Tests for lifetime.py: units, window sizes, ticks.
# Created: 2026-10-18

import pytest

from nonceward.lifetime import DEFAULT_POLICY, LifetimePolicy, TimeUnit, configure


class TestTimeUnit:
    def test_parse_members_and_names(self):
        assert TimeUnit.parse(TimeUnit.HOURS) is TimeUnit.HOURS
        assert TimeUnit.parse("minutes") is TimeUnit.MINUTES
        assert TimeUnit.parse("second") is TimeUnit.SECONDS
        assert TimeUnit.parse("Hour") is TimeUnit.HOURS

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError, match="Unknown time unit"):
            TimeUnit.parse("fortnight")

    def test_seconds(self):
        assert TimeUnit.SECONDS.seconds == 1
        assert TimeUnit.MINUTES.seconds == 60
        assert TimeUnit.HOURS.seconds == 3600


class TestConfigure:
    def test_amount_times_unit_once(self):
        assert configure(24, "hours").window_seconds == 86400
        assert configure(15, "minutes").window_seconds == 900
        assert configure(90, TimeUnit.SECONDS).window_seconds == 90

    def test_default_unit_is_minutes(self):
        assert configure(5).window_seconds == 300

    def test_default_policy_is_one_day(self):
        assert DEFAULT_POLICY.window_seconds == 86400
        assert DEFAULT_POLICY.bucket_seconds == 43200

    @pytest.mark.parametrize("amount", [0, -3, 1.5, "10", True])
    def test_rejects_bad_amount(self, amount):
        with pytest.raises(ValueError):
            configure(amount, "minutes")

    def test_rejects_window_too_small(self):
        with pytest.raises(ValueError, match="at least 2"):
            configure(1, "seconds")

    def test_odd_window_rounds_bucket_down(self):
        policy = configure(3, "seconds")
        assert policy.window_seconds == 3
        assert policy.bucket_seconds == 1

    def test_policy_is_immutable(self):
        policy = configure(1, "hours")
        with pytest.raises(AttributeError):
            policy.window_seconds = 10


class TestTick:
    def test_buckets_are_half_the_window(self):
        policy = LifetimePolicy(window_seconds=100)
        assert policy.bucket_seconds == 50
        assert policy.tick(0) == 0
        assert policy.tick(49.9) == 0
        assert policy.tick(50) == 1
        assert policy.tick(149) == 2

    def test_tick_defaults_to_now(self, monkeypatch):
        import nonceward.lifetime as mod

        monkeypatch.setattr(mod.time, "time", lambda: 1000.0)
        assert LifetimePolicy(window_seconds=100).tick() == 20
