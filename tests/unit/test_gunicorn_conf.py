import os
import runpy

CONF = os.path.join(os.path.dirname(__file__), "..", "..", "docker", "gunicorn_conf.py")


def test_single_worker_by_default(monkeypatch):
    monkeypatch.delenv("WEB_CONCURRENCY", raising=False)
    conf = runpy.run_path(CONF)
    assert conf["workers"] == 1
    assert conf["worker_class"] == "uvicorn.workers.UvicornWorker"


def test_worker_count_from_env(monkeypatch):
    monkeypatch.setenv("WEB_CONCURRENCY", "3")
    assert runpy.run_path(CONF)["workers"] == 3
