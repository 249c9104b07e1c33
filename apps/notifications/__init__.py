"""Notifications app package.

Delivers e-mail and in-app notifications about bookings, reviews, listings
and payouts.
"""
