import uvicorn

from config import API_HOST, API_PORT, API_RELOAD, LOG_LEVEL
from utils import setup_logging


def run():
    setup_logging(LOG_LEVEL)
    uvicorn.run("app:app",
                host=API_HOST,
                port=API_PORT,
                reload=API_RELOAD)


if __name__ == '__main__':
    run()
