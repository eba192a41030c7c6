"""Gunicorn configuration for production deployment."""

import os

# Server socket
bind = os.environ.get('GUNICORN_BIND', '0.0.0.0:8000')

# Worker processes. SQLite serializes writers, so keep the pool small;
# BEGIN IMMEDIATE plus busy_timeout queue concurrent writes.
workers = int(os.environ.get('GUNICORN_WORKERS', 2))
threads = 4
worker_class = 'gthread'

timeout = 30
graceful_timeout = 30
keepalive = 5

# Logging
accesslog = os.path.join(os.environ.get('LOG_DIR', 'logs'), 'gunicorn-access.log')
errorlog = os.path.join(os.environ.get('LOG_DIR', 'logs'), 'gunicorn-error.log')
loglevel = 'info'
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = 'tablekeeper'

# Preload app for faster worker startups
preload_app = True

# Worker recycling
max_requests = 1000
max_requests_jitter = 50

# Security
limit_request_line = 8190
limit_request_fields = 100
limit_request_field_size = 8190
