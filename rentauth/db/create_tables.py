"""Create the accounts/roles/sessions schema on the configured database."""
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from rentauth.core.config import get_settings
from rentauth.core.logging_setup import configure_logging

from .session import Base, get_engine
from . import models  # noqa: F401  # ensure models are imported for metadata

logger = logging.getLogger(__name__)


def create_all() -> None:
    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    logger.info("Schema ready on %s", engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    configure_logging(get_settings())
    try:
        create_all()
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
