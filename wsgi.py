"""
WSGI entry point.

Usage:
    flask --app wsgi run
    flask --app wsgi seed-portfolio
    flask --app wsgi reset-portfolio
    gunicorn wsgi:app
"""

from portfolio import create_app

app = create_app()
