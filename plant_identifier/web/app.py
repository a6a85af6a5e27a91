from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles

from plant_identifier.services.api import app as api_app

WEB_DIR = Path(__file__).resolve().parent

app = FastAPI(title="plant-identifier web")


@app.get("/", response_class=HTMLResponse)
def index():
    return (WEB_DIR / "templates" / "index.html").read_text(encoding="utf-8")


app.mount("/static", StaticFiles(directory=str(WEB_DIR / "static")), name="static")

# Starlette matches routes in registration order and the API mount has an
# empty prefix, so it has to be added after the page and /static.
app.mount("", api_app)
