"""
FastAPI Production Application

Main entry point for the FoodChop Ordering API.

    uvicorn foodchop.main:app
"""

from foodchop.serving.api import create_api_app

app = create_api_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
