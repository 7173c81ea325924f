"""
Gunicorn configuration for production deployment.
"""
import os

# Server socket
# Use PORT if set, otherwise default to 5000 for local development
PORT = int(os.environ.get("PORT", 5000))
bind = f"0.0.0.0:{PORT}"
backlog = 2048

# Worker processes
# eventlet: one green thread per request, suspended at each storage call
workers = int(os.environ.get("WEB_CONCURRENCY", 1))
worker_class = "eventlet"
worker_connections = 1000
timeout = 60
keepalive = 2
graceful_timeout = 30  # Time to wait for workers to finish before killing

# Logging
accesslog = "-"
errorlog = "-"
loglevel = "info"

# Process naming
proc_name = "finance-tracker"

wsgi_app = "wsgi:app"


def worker_int(worker):
    """Called when a worker receives INT or QUIT signal."""
    import logging
    logging.warning(f"Worker {worker.pid} received INT/QUIT signal")


def worker_exit(server, worker):
    """Drain the worker's storage pool before it exits."""
    import logging
    from finance_tracker import shutdown

    app = getattr(worker, "wsgi", None)
    if app is None:
        return
    try:
        shutdown(app)
    except Exception as e:
        logging.error(f"Worker {worker.pid} failed to drain storage pool: {e}", exc_info=True)
