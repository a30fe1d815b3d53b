from pathlib import Path


# Project root (the directory holding pyproject.toml)
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent

# Local overrides first, checked-in defaults otherwise
ENV_FILE = BASE_DIR / '.env'
ENV_EXAMPLE_FILE = BASE_DIR / '.env.example'

LOG_DIR = BASE_DIR / 'logs'
