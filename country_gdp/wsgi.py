"""
WSGI config for the country_gdp project.

The default database connection is opened before the application is handed
to the server, so a process that cannot reach its store never starts serving.
"""
import os

from django.core.wsgi import get_wsgi_application
from django.db import connections

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "country_gdp.settings")

application = get_wsgi_application()

connections["default"].ensure_connection()
