# app/main.py
import uvicorn

from app.api import create_app
from app.data.database import make_engine
from app.utils.logging import get_logger
from app.utils.settings import DATABASE_URL, HOST, PORT

logger = get_logger(__name__)

engine = make_engine(DATABASE_URL)
app = create_app(engine)


def run() -> None:
    logger.info(f"Starting cart service on {HOST}:{PORT}")
    try:
        uvicorn.run(app, host=HOST, port=PORT)
    finally:
        engine.dispose()


if __name__ == "__main__":
    run()
