# api/submit.py
# Vercel entrypoint for POST/OPTIONS /api/submit (test result submissions)

import os
import sys

# Add project root to sys.path for local imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from mangum import Mangum

from core.api import app

asgi_handler = Mangum(app, lifespan="off")


def handler(request):
    """Vercel serverless handler for the submission endpoint."""
    return asgi_handler(request, None)
