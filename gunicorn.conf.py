"""Gunicorn config for container deployment."""
import os

# Bind to the platform's PORT or default 8080
bind = f"0.0.0.0:{os.environ.get('PORT', '8080')}"

# Uvicorn async workers. Each worker loads its own copy of the events
# DataFrame at startup. Tune via WEB_CONCURRENCY env var.
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.environ.get("WEB_CONCURRENCY", "2"))

# Exports of large unfiltered windows can take a while
timeout = 120

# Graceful timeout for shutdown
graceful_timeout = 30

# Keep-alive must exceed the proxy keep-alive (default 60s)
keepalive = 65

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
