"""
Gunicorn configuration for the Storefront API

    gunicorn storefront.main:app -c gunicorn.conf.py
"""

import multiprocessing
import os

# Server socket
bind = os.getenv("BIND", f"{os.getenv('API_HOST', '0.0.0.0')}:{os.getenv('API_PORT', '8000')}")
backlog = 2048

# Worker processes
workers = int(os.getenv("WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"
max_requests = 10000
max_requests_jitter = 1000
# Stripe charges and SendGrid calls run inside the request
timeout = 60
keepalive = 5
graceful_timeout = 30

proc_name = "storefront-api"

# Logging; application logs go through structlog on stdout
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
accesslog = os.getenv("ACCESS_LOG", "-")
access_log_format = '%(h)s "%(r)s" %(s)s %(b)s %(D)s'


def post_fork(server, worker):
    server.log.info("Worker spawned (pid: %s)", worker.pid)


def worker_abort(worker):
    worker.log.warning("Worker aborted (pid: %s)", worker.pid)
