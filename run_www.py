#!/usr/bin/env python3
from __future__ import annotations

import os
import sys

def main() -> None:
    host = os.environ.get("STATEMENT_ENGINE_HOST") or "0.0.0.0"
    port = int(os.environ.get("STATEMENT_ENGINE_PORT") or "8000")
    reload = (os.environ.get("STATEMENT_ENGINE_RELOAD") or "").lower() in ("1", "true", "yes")
    try:
        import uvicorn
    except ImportError:
        print("uvicorn is missing. Install with: pip install -e .", file=sys.stderr)
        raise
    uvicorn.run("webapp.server:app", host=host, port=port, reload=reload)

if __name__ == "__main__":
    main()
