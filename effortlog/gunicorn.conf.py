import multiprocessing
import os

wsgi_app = "effortlog.wsgi:app"

# PORT is honoured for platforms that inject it; EFFORTLOG_BIND wins when set.
bind = os.environ.get("EFFORTLOG_BIND") or f"0.0.0.0:{os.environ.get('PORT', '8000')}"
workers = int(os.environ.get("EFFORTLOG_WORKERS", str(min(multiprocessing.cpu_count() * 2 + 1, 8))))
threads = int(os.environ.get("EFFORTLOG_THREADS", "2"))
worker_class = "gthread"
timeout = int(os.environ.get("EFFORTLOG_TIMEOUT", "30"))
graceful_timeout = 20
max_requests = int(os.environ.get("EFFORTLOG_MAX_REQUESTS", "1000"))
max_requests_jitter = 100
accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
