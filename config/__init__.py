"""Top-level package for Django configuration.

Contains settings modules for different environments and entry points
for WSGI and ASGI of the QuietSummit marketplace backend.
"""

# Import the Celery application as soon as Django starts. Without this
# the shared task registry will not be populated.
from .celery import app as celery_app  # noqa: F401
