"""Coupons app package: discount codes applied to journey bookings."""
