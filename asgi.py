"""
asgi.py -- ASGI application object for the classifieds API.

Run with:  uvicorn asgi:app --reload
           python main.py
"""

from api.main import app

__all__ = ["app"]
