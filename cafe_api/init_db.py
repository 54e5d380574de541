import json
import os
import sys
from typing import Optional

from cafe_api import crud
from cafe_api.database import Base, get_engine, get_session_local
from cafe_api.utils.logger import get_logger
import cafe_api.models  # noqa: F401

logger = get_logger(__name__)

def load_seed(path: str) -> list:
    """Read a JSON array of café objects (name, description, location, icon, images)."""
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array of cafés")
    return data

def init_db(seed_file: Optional[str] = None) -> int:
    """
    Create missing tables and, when the cafés table is empty, seed it.

    Returns the number of cafés inserted.
    """
    seed_file = seed_file or os.getenv("CAFE_SEED_FILE")
    try:
        Base.metadata.create_all(bind=get_engine())

        if not seed_file:
            logger.info("Database initialization check complete (no seed file)")
            return 0

        db = get_session_local()()
        try:
            if crud.get_cafes(db):
                logger.info("Cafés already present, skipping seed")
                return 0
            cafes = load_seed(seed_file)
            for item in cafes:
                crud.create_cafe(
                    db,
                    name=item["name"],
                    description=item.get("description"),
                    location=item.get("location"),
                    icon=item.get("icon"),
                    images=item.get("images"),
                )
            logger.info(f"Seeded {len(cafes)} cafés from {seed_file}")
            return len(cafes)
        finally:
            db.close()
    except Exception as e:
        logger.error(f"Error during database initialization: {e}")
        raise

if __name__ == "__main__":
    init_db(sys.argv[1] if len(sys.argv) > 1 else None)
