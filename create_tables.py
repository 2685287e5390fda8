from core.config import settings
from core.init_db import init_db
from core.logging_config import configure_logging

configure_logging(settings.LOG_LEVEL)
init_db()
