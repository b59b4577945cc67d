import logging

import uvicorn
from dotenv import find_dotenv, load_dotenv

from storage_proof.app import create_app
from storage_proof.config import Settings


def main():
    # the package already built CONFIG on import, so settings are re-read once .env is loaded
    load_dotenv(find_dotenv(usecwd=True))
    settings = Settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(create_app(settings), host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
