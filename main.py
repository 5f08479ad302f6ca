import uvicorn

from hookpress.config import settings
from hookpress.main import create_app
from hookpress.middleware.logging import configure_logging

app = create_app()
configure_logging(settings, hooks=app.state.hooks)


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.debug)
