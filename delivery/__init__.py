"""Notification delivery engine Django app."""
