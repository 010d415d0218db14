import os
import logging

import uvicorn
from dotenv import load_dotenv

from handspell.backend.api.app import create_app


def main():
    load_dotenv()
    app = create_app()
    uvicorn.run(
        app,
        host=os.getenv("HANDSPELL_HOST", "127.0.0.1"),
        port=int(os.getenv("HANDSPELL_PORT", "8000")),
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    try:
        main()
    except KeyboardInterrupt:
        print("Exit")
