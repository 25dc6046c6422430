from pathlib import Path

from fastapi.templating import Jinja2Templates

from fornaccio.core.config import settings

PACKAGE_DIR = Path(__file__).resolve().parent.parent

templates = Jinja2Templates(directory=str(PACKAGE_DIR / "templates"))
templates.env.globals["project_name"] = settings.PROJECT_NAME
templates.env.filters["euros"] = lambda value: f"{(value or 0):.2f}€"
