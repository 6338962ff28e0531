#!/usr/bin/env python
"""Run the notification engine on Django's development server."""

import os
import sys

from django.core.management import execute_from_command_line


def main():
    """Start the engine through the runlocal command.

    Extra arguments (for example an address:port) are passed through.
    runlocal skips migration checks because the hosted database owns the
    notification tables, and it prints which providers and relay are set.
    """
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "notification_engine.settings")
    execute_from_command_line([sys.argv[0], "runlocal", *sys.argv[1:]])


if __name__ == "__main__":
    main()
