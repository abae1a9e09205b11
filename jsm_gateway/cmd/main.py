from __future__ import annotations
import logging
import os
import uvicorn
from jsm_gateway.api.app import create_app


def logging_conf() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )

def main() -> None:
    logging_conf()
    app = create_app()
    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_config=None,
    )

if __name__ == "__main__":
    main()
