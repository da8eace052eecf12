"""ShoeStore FastAPI application.

Single-domain web server that processes commands synchronously via HTTP.
The domain is initialized at import so uvicorn workers share it, and the
administrator from ADMIN_EMAIL / ADMIN_PASSWORD is seeded before serving.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from shoestore.domain import shoestore
from shoestore.identity.registration import ensure_admin
from shoestore.web import create_app

shoestore.init()

with shoestore.domain_context():
    ensure_admin()

app = create_app()
