import uvicorn

from newsapi.config import settings


def main() -> None:
    # log_config=None keeps uvicorn from replacing our logging setup.
    uvicorn.run(
        "newsapi.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
