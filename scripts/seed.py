from catalog.core.config import settings
from catalog.core.logging_config import configure_logging
from catalog.db.session import engine, Session, init_db

from catalog.db.seed import seed_all


def run_seed():
    configure_logging(settings.LOG_LEVEL)
    init_db()
    with Session(engine) as session:
        seed_all(session=session, seed_path="catalog/db/seed_data.yaml")


if __name__ == "__main__":
    run_seed()
