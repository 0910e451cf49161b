from dotenv import load_dotenv

load_dotenv()

from app.core.config import settings  # noqa: E402
from app.main import app  # noqa: E402,F401


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
