# ASGI entry point
# Serve with: uvicorn asgi:app --host 0.0.0.0 --port 8000 (from the backend directory)

import sys
import os

# Add project to path
project_path = os.path.dirname(os.path.abspath(__file__))
if project_path not in sys.path:
    sys.path.insert(0, project_path)

# Load environment variables from .env file if present (before settings are built)
from dotenv import load_dotenv
env_path = os.path.join(project_path, '.env')
if os.path.exists(env_path):
    load_dotenv(env_path)

from docsign.main import app  # noqa: E402
