"""Tests for the order availability policy."""

from datetime import datetime, time

from commerce_control.config.constants import DEFAULT_DISABLED_MESSAGE
from commerce_control.models.settings import OrderControlSettings
from commerce_control.services.order_availability import (
    can_order,
    checkout_block,
    order_statistics,
    orders_enabled,
    within_date_range,
    within_timeframe,
)


def at(hour, minute=0, second=0, day=15):
    return datetime(2024, 6, day, hour, minute, second)


class TestTimeframe:
    def test_same_day_window(self):
        settings = OrderControlSettings(enable_timeframe=True, start_time="09:00", end_time="17:00")
        assert within_timeframe(settings, at(9, 0))
        assert within_timeframe(settings, at(12, 30))
        assert not within_timeframe(settings, at(8, 59))
        assert not within_timeframe(settings, at(17, 1))

    def test_end_minute_is_inclusive(self):
        settings = OrderControlSettings(enable_timeframe=True, start_time="09:00", end_time="17:00")
        assert within_timeframe(settings, at(17, 0, 59))

    def test_overnight_window(self):
        settings = OrderControlSettings(enable_timeframe=True, start_time="22:00", end_time="06:00")
        assert within_timeframe(settings, at(23, 0))
        assert within_timeframe(settings, at(2, 0))
        assert within_timeframe(settings, at(6, 0))
        assert not within_timeframe(settings, at(12, 0))
        assert not within_timeframe(settings, at(21, 59))

    def test_missing_bound_leaves_window_open(self):
        settings = OrderControlSettings(enable_timeframe=True, start_time="", end_time="17:00")
        assert settings.start_time is None
        assert within_timeframe(settings, at(23, 0))

    def test_seconds_are_truncated(self):
        settings = OrderControlSettings(start_time="09:15:45")
        assert settings.start_time == time(9, 15)


class TestDateRange:
    def test_bounds(self):
        settings = OrderControlSettings(
            enable_date_range=True,
            start_datetime="2024-06-10T08:00",
            end_datetime="2024-06-20T18:00",
        )
        assert within_date_range(settings, datetime(2024, 6, 10, 8, 0))
        assert within_date_range(settings, datetime(2024, 6, 15, 12, 0))
        assert not within_date_range(settings, datetime(2024, 6, 10, 7, 59))
        assert not within_date_range(settings, datetime(2024, 6, 20, 18, 1))

    def test_open_ended(self):
        settings = OrderControlSettings(enable_date_range=True, start_datetime="2024-06-10T08:00")
        assert within_date_range(settings, datetime(2030, 1, 1))
        assert not within_date_range(settings, datetime(2024, 6, 1))


class TestOrdersEnabled:
    def test_defaults_allow_ordering(self):
        assert orders_enabled(OrderControlSettings(), at(3, 0))

    def test_kill_switch(self):
        settings = OrderControlSettings(enable_orders=False)
        assert not orders_enabled(settings, at(12, 0))
        assert not can_order(1, settings, at(12, 0))

    def test_date_range_and_timeframe_both_apply(self):
        settings = OrderControlSettings(
            enable_timeframe=True,
            start_time="09:00",
            end_time="17:00",
            enable_date_range=True,
            start_datetime="2024-06-10T00:00",
            end_datetime="2024-06-20T23:59",
        )
        # Inside the date range, outside the timeframe
        assert not orders_enabled(settings, datetime(2024, 6, 15, 20, 0))
        # Inside the timeframe, outside the date range
        assert not orders_enabled(settings, datetime(2024, 7, 1, 12, 0))
        assert orders_enabled(settings, datetime(2024, 6, 15, 12, 0))

    def test_disabled_checks_are_ignored(self):
        settings = OrderControlSettings(
            enable_timeframe=False,
            start_time="09:00",
            end_time="10:00",
            enable_date_range=False,
            end_datetime="2000-01-01T00:00",
        )
        assert orders_enabled(settings, at(23, 0))


class TestCanOrder:
    closed = {"enable_timeframe": True, "start_time": "09:00", "end_time": "10:00"}

    def test_all_products_follow_the_window(self):
        settings = OrderControlSettings(restriction_type="all", **self.closed)
        assert not can_order(5, settings, at(12, 0))
        assert can_order(5, settings, at(9, 30))

    def test_product_scope_only_restricts_listed_products(self):
        settings = OrderControlSettings(
            restriction_type="products", restricted_products=[5], **self.closed
        )
        assert not can_order(5, settings, at(12, 0))
        assert can_order(6, settings, at(12, 0))

    def test_category_scope(self):
        settings = OrderControlSettings(
            restriction_type="categories", restricted_categories=[3, 4], **self.closed
        )
        assert not can_order(1, settings, at(12, 0), product_categories=[4, 9])
        assert can_order(1, settings, at(12, 0), product_categories=[9])
        assert can_order(1, settings, at(12, 0))

    def test_empty_category_scope_restricts_nothing(self):
        settings = OrderControlSettings(restriction_type="categories", **self.closed)
        assert can_order(1, settings, at(12, 0), product_categories=[3])

    def test_repeated_checks_agree_and_leave_settings_untouched(self):
        now = at(12, 0)
        scopes = [
            OrderControlSettings(restriction_type="all", **self.closed),
            OrderControlSettings(
                restriction_type="categories", restricted_categories=[3], **self.closed
            ),
            OrderControlSettings(
                restriction_type="products", restricted_products=[5], **self.closed
            ),
        ]
        for settings in scopes:
            before = settings.model_dump()

            first = (can_order(5, settings, now, product_categories=[3]), orders_enabled(settings, now))
            second = (can_order(5, settings, now, product_categories=[3]), orders_enabled(settings, now))

            assert first == second == (False, False)
            assert settings.model_dump() == before


class TestCheckoutBlock:
    def test_not_blocked(self):
        assert checkout_block(OrderControlSettings(), at(12, 0), "https://shop.example/") is None

    def test_redirects_home_without_redirect_url(self):
        settings = OrderControlSettings(enable_orders=False)
        block = checkout_block(settings, at(12, 0), "https://shop.example/")
        assert block == {
            "message": DEFAULT_DISABLED_MESSAGE,
            "redirect_url": "https://shop.example/",
        }

    def test_custom_redirect_and_message(self):
        settings = OrderControlSettings(
            enable_orders=False,
            redirect_url="https://shop.example/closed",
            disabled_message="Back on Monday",
        )
        block = checkout_block(settings, at(12, 0), "https://shop.example/")
        assert block["redirect_url"] == "https://shop.example/closed"
        assert block["message"] == "Back on Monday"


def test_blank_disabled_message_uses_default():
    settings = OrderControlSettings(disabled_message="   ")
    assert settings.disabled_message == DEFAULT_DISABLED_MESSAGE


def test_order_statistics():
    settings = OrderControlSettings(enable_timeframe=True, start_time="09:00", end_time="10:00")
    stats = order_statistics(settings, at(12, 0))
    assert stats["current_status"] == "disabled"
    assert stats["start_time"] == "09:00"
    assert stats["end_time"] == "10:00"
    assert stats["restriction_type"] == "all"
