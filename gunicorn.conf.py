"""
Gunicorn Configuration

Runs the FastAPI app with Uvicorn workers. Bind address and worker count
come from the same API_* settings the application reads.
"""

import multiprocessing

from sales_analytics.config import get_settings

settings = get_settings()

# Server socket
bind = f"{settings.api_host}:{settings.api_port}"
backlog = 2048

# Worker processes
workers = settings.api_workers or multiprocessing.cpu_count() * 2 + 1
worker_class = "uvicorn.workers.UvicornWorker"
max_requests = 10000
max_requests_jitter = 1000
timeout = 120
keepalive = 5
graceful_timeout = 30

proc_name = "sales-analytics-api"

# Logging
errorlog = "-"
loglevel = settings.monitoring.log_level.lower()
accesslog = "-"
