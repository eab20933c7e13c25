# gunicorn.conf.py
import os

# Application
wsgi_app = "blogify.wsgi:application"

# Worker configuration
workers = int(os.getenv("GUNICORN_WORKERS", 2))
worker_class = "sync"
timeout = int(os.getenv("GUNICORN_TIMEOUT", 60))
keepalive = 2
max_requests = 1000
max_requests_jitter = 50

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("GUNICORN_LOG_LEVEL", "info")

# Process naming
proc_name = "blogify-api"

# Bind address
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")

# Security headers (if behind proxy)
forwarded_allow_ips = os.getenv("FORWARDED_ALLOW_IPS", "*")


def worker_exit(server, worker):
    # Release the worker's database connection held by the publishing store
    from django.apps import apps

    if apps.ready:
        apps.get_app_config("publishing").store.close()
