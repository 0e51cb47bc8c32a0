from functools import lru_cache

from config.settings import settings
from database.db import SheetStore
from models.registry import init_sheets


# one store (and so one store lock) per process
@lru_cache(maxsize=1)
def get_store() -> SheetStore:
    store = init_sheets(SheetStore(settings.WORKBOOK_PATH or None))
    store.commit()
    return store
