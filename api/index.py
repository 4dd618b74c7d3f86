# Serverless entrypoint: the Python runtime serves the ASGI `app` exported here.

from mejora.main import app  # noqa: F401
