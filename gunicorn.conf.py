"""
Gunicorn configuration file for production deployment.
"""
from pathlib import Path

# Load LOG_DIR and bind address from .env (via framework.config)
from framework.config import settings

LOG_DIR = Path(settings.LOG_DIR)
LOG_DIR.mkdir(parents=True, exist_ok=True)

# Server
bind = f"{settings.HOST}:{settings.PORT}"
backlog = 2048

# Worker processes; each worker owns its own engine and connection pool
workers = 2
worker_class = "uvicorn.workers.UvicornWorker"
max_requests = 1000  # Restart worker after this many requests
max_requests_jitter = 50
# Must exceed DB_COMMAND_TIMEOUT so a slow commit can still roll back cleanly
timeout = max(120, settings.DB_COMMAND_TIMEOUT * 2)
keepalive = 5
graceful_timeout = 30

# Process name (from config; fallback to APP_NAME)
proc_name = (settings.GUNICORN_PROC_NAME or settings.APP_NAME.lower().replace(" ", "-"))[:32]

# Logging (paths built from LOG_DIR in .env)
accesslog = str(LOG_DIR / "gunicorn_access.log")
errorlog = str(LOG_DIR / "gunicorn_error.log")
loglevel = "info"
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process management
daemon = False  # Managed by systemd
pidfile = str(LOG_DIR / "gunicorn.pid")
umask = 0o007

# Engines are created per worker in the app lifespan, so preloading is safe
preload_app = True

# Security
limit_request_line = 4094
limit_request_fields = 100
limit_request_field_size = 8190

def when_ready(server):
    server.log.info("%s is ready. Listening on %s", settings.APP_NAME, server.address)

def on_exit(server):
    server.log.info("%s is shutting down.", settings.APP_NAME)

def post_fork(server, worker):
    server.log.info("Worker spawned (pid: %s)", worker.pid)
