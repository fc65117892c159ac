from marketplace.app import create_app
from marketplace.config import settings

app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("run:app", host="0.0.0.0", port=8000, reload=settings.debug)
