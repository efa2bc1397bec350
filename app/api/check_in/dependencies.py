from datetime import date

from app.core.utils import today


def get_today() -> date:
    return today()
