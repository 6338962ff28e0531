"""Django project package for the notification engine."""
