"""
WSGI entry point for school_hub's HTTP API.

The realtime relay needs ASGI; serve ``config.asgi:application`` when sockets
are required and use this module for plain HTTP deployments.
"""

import os
import sys
from pathlib import Path

from django.core.wsgi import get_wsgi_application

BASE_DIR = Path(__file__).resolve(strict=True).parent.parent
sys.path.append(str(BASE_DIR / "school_hub"))

if "DJANGO_SETTINGS_MODULE" not in os.environ:
    build_env = os.environ.get("BUILD_ENV", "production").lower()
    os.environ["DJANGO_SETTINGS_MODULE"] = (
        "config.settings.local" if build_env == "local" else "config.settings.production"
    )

application = get_wsgi_application()
