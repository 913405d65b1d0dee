"""
Gunicorn configuration for the StandupSync API.

Env vars that override defaults:
  PORT       — TCP port to bind
  WORKERS    — number of worker processes (default: 2)
  LOG_LEVEL  — gunicorn log level (default: info)

Run with:  gunicorn standupsync.main:app -c gunicorn.conf.py
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

workers = int(os.environ.get("WORKERS", "2"))

# Each worker runs Uvicorn's ASGI event loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

# AI calls are bounded by AI_TIMEOUT_SECONDS (30 s); leave headroom above it.
timeout = 120

# stdout only; the app logger writes there too.
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

graceful_timeout = 30
