# Core module exports
from propcheck.core.config import Settings, get_settings
from propcheck.core.logging import (
    configure_logging,
    configure_from_settings,
    get_logger,
    generate_run_id,
    executor_logger,
    registry_logger,
)
