"""Reservations of homestay stays and journey departures.

Holds the booking and traveler models, server-side pricing for both kinds
of booking, date locking against double booking and the periodic tasks
that expire unpaid holds and move stays through their lifecycle.
"""
