# gunicorn -c docker/gunicorn_conf.py review_cards.main:app
import os

bind = f"{os.getenv('HOST', '0.0.0.0')}:{os.getenv('PORT', '8000')}"
# Admin sessions and the review tracker are process-local, so one worker by default.
# Raising WEB_CONCURRENCY splits logins and duplicate detection across workers.
workers = int(os.getenv("WEB_CONCURRENCY", "1")) or 1
worker_class = "uvicorn.workers.UvicornWorker"
# LLM retries can take a while (up to REVIEW_MAX_RETRIES provider calls per request)
timeout = int(os.getenv("TIMEOUT", "120"))
keepalive = 5
graceful_timeout = 30
proc_name = "review-cards-api"
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
