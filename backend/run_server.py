"""Start the API with Uvicorn.

Host and port are read from the `HOST` and `PORT` environment variables
(defaults `0.0.0.0` and `8000`). Application settings such as
`DATABASE_URL` or `BASE_PATH` are read by `sistema_academico.config`.
"""
import os
import sys
from pathlib import Path

import uvicorn

BASE = Path(__file__).parent
if str(BASE) not in sys.path:
    sys.path.insert(0, str(BASE))


def run():
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run("sistema_academico.main:app", host=host, port=port, reload=False, log_level="info")


if __name__ == '__main__':
    run()
