"""Homestay listings: photos, amenities, location tree, search and the
per-night availability calendar hosts manage."""
