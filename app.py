"""
WSGI entrypoint.

Run locally with `flask --app app run`, or under gunicorn as `app:app`.
"""
import os

from handwriting import create_app

app = create_app(os.getenv("FLASK_ENV", "default"))
