#!/usr/bin/env python
"""Django's command-line utility for administrative tasks."""
import os
import sys


def main():
    """Run administrative tasks."""
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "country_gdp.settings")
    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    # runserver with no address binds the configured PORT
    if sys.argv[1:] == ["runserver"]:
        from django.conf import settings

        sys.argv.append(f"0.0.0.0:{settings.PORT}")

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
