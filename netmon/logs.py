import json
from datetime import datetime


def log_json(obj, path):
    """Append one JSON line to path; a no-op when path is empty."""
    if not path:
        return
    obj = {"ts": datetime.utcnow().isoformat(), **obj}
    try:
        with open(path, "a") as f:
            f.write(json.dumps(obj) + "\n")
    except OSError:
        pass
