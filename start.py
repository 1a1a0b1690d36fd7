"""Server startup for the TubeHub API."""
import os
import sys
from pathlib import Path

import uvicorn

sys.path.insert(0, str(Path(__file__).parent / "src"))

from api.server import app, config  # noqa: E402

if __name__ == "__main__":
    port = int(os.environ.get("PORT", "10000"))
    print(f"[start.py] Starting TubeHub on port {port}", flush=True)
    uvicorn.run(app, host="0.0.0.0", port=port, log_level=config["log_level"].lower())
