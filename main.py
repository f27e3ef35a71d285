"""Run the API with uvicorn: ``python main.py``."""

import os

import uvicorn


if __name__ == "__main__":
    uvicorn.run(
        "asgi:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("ENV", "development") == "development",
    )
