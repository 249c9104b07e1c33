"""Journeys app package.

Multi-day guided trips: the published catalogue, their day-by-day
itinerary and the scheduled departures travellers book seats on.
"""
