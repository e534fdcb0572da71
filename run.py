import os

import uvicorn

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    # Client storage and the HTTP client singletons are per process; keep
    # one worker unless storage moves out of memory.
    workers = int(os.environ.get("WEB_CONCURRENCY", 1))
    uvicorn.run(
        "tireshop.main:app",
        host="0.0.0.0",
        port=port,
        workers=workers,
    )
