"""EMP monitor configuration loaded from environment variables."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# ============================================================================
# Contract / RPC Configuration
# ============================================================================

RPC_URL = os.getenv('RPC_URL', 'http://127.0.0.1:8545')
EMP_ADDRESS = os.getenv('EMP_ADDRESS', '')
CONTRACT_NAME = os.getenv('CONTRACT_NAME', 'EMP')

# Provider request timeout; 0 keeps the provider default
RPC_TIMEOUT = float(os.getenv('RPC_TIMEOUT', '0'))

FIXED_POINT_DECIMALS = int(os.getenv('FIXED_POINT_DECIMALS', '18'))

# ============================================================================
# Polling Configuration
# ============================================================================

POLL_INTERVAL = float(os.getenv('POLL_INTERVAL', '10'))
SPONSOR_FROM_BLOCK = int(os.getenv('SPONSOR_FROM_BLOCK', '0'))
SPONSOR_DISCOVERY = os.getenv('SPONSOR_DISCOVERY', 'full').lower()

# 0 means one worker per sponsor
MAX_WORKERS = int(os.getenv('MAX_WORKERS', '0'))

# ============================================================================
# Logging Configuration
# ============================================================================

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
LOG_FILE = os.getenv('LOG_FILE', '')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'detailed')

# ============================================================================
# Validation
# ============================================================================

def validate_config() -> None:
    """Validate configuration values."""
    errors = []

    if POLL_INTERVAL <= 0:
        errors.append("POLL_INTERVAL must be positive")

    if SPONSOR_FROM_BLOCK < 0:
        errors.append("SPONSOR_FROM_BLOCK must be >= 0")

    if SPONSOR_DISCOVERY not in ('full', 'incremental'):
        errors.append("SPONSOR_DISCOVERY must be 'full' or 'incremental'")

    if MAX_WORKERS < 0:
        errors.append("MAX_WORKERS must be >= 0")

    if RPC_TIMEOUT < 0:
        errors.append("RPC_TIMEOUT must be >= 0")

    if not (0 <= FIXED_POINT_DECIMALS <= 77):
        errors.append("FIXED_POINT_DECIMALS must be between 0 and 77")

    if LOG_FORMAT not in ('json', 'detailed', 'simple'):
        errors.append("LOG_FORMAT must be one of json, detailed, simple")

    if errors:
        raise ValueError("Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors))


# ============================================================================
# Logging Setup
# ============================================================================

def setup_logging() -> None:
    """Configure logging based on config settings."""
    import logging
    import sys

    level = getattr(logging, LOG_LEVEL, logging.INFO)

    if LOG_FORMAT == 'json':
        format_string = '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}'
    elif LOG_FORMAT == 'detailed':
        format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    else:  # simple
        format_string = '%(levelname)s: %(message)s'

    handlers = []

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(logging.Formatter(format_string))
    handlers.append(stdout_handler)

    if LOG_FILE:
        file_handler = logging.FileHandler(LOG_FILE)
        file_handler.setFormatter(logging.Formatter(format_string))
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True
    )

    logging.getLogger('emp_monitor').setLevel(level)

    # Reduce noise from third-party libraries
    logging.getLogger('web3').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)


# ============================================================================
# Initialization
# ============================================================================

validate_config()
