import threading

from fastapi import FastAPI
from fastapi.responses import Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST


def create_app(store, registry):
    """HTTP view over a running monitor; reads only locked snapshots."""
    app = FastAPI(title="netmon")

    @app.get("/healthz")
    def health(): return {"ok": True}

    @app.get("/metrics")
    def metrics(): return Response(generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

    @app.get("/stats")
    def stats():
        snap = store.snapshot()
        return {
            "targets": {t: s.to_dict() for t, s in snap.items()},
            "total_sent": sum(s.sent for s in snap.values()),
        }

    return app


def serve_in_background(app, port, host="127.0.0.1"):
    import uvicorn
    server = uvicorn.Server(uvicorn.Config(app, host=host, port=port, log_level="warning"))
    threading.Thread(target=server.run, daemon=True).start()
    return server
