"""Configuration module for the SchoolHub backend.

This module provides centralized configuration management, including directory
paths, API server settings, authentication settings, and code generation
defaults. All configuration values can be overridden via environment variables.
"""

import os
import string
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory name
DATA_DIR_NAME = "data"
DATA_DIR = Path(os.getenv("DATA_DIR", str(ROOT_DIR / DATA_DIR_NAME)))

# --- Database Configuration ---

DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR}/schoolhub.db")

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# CORS allowed origins (comma-separated list)
# Default includes local development addresses. For production, set via
# CORS_ALLOWED_ORIGINS environment variable.
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,"
    "http://127.0.0.1:5173",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Authentication Configuration ---

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "your-secret-key-change-in-production")
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
    os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7))  # 7 days
)

# Browser clients carry the token in this cookie instead of a bearer header
AUTH_COOKIE_NAME: str = os.getenv("AUTH_COOKIE_NAME", "auth-token")

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

USER_ROLES = ("teacher", "student", "parent")
NAME_MIN_LENGTH: int = 2
PASSWORD_MIN_LENGTH: int = 6

# --- Code Generation Configuration ---

CODE_ALPHABET: str = string.ascii_uppercase + string.digits
CODE_LENGTH: int = 6
CODE_MAX_ATTEMPTS: int = 10
PARENT_CODE_PREFIX: str = "PARENT-"
CLASS_CODE_PREFIX: str = "CLASS-"

# Number of times an insert is retried with a fresh code after the database
# rejects the code as a duplicate.
CODE_INSERT_RETRIES: int = int(os.getenv("CODE_INSERT_RETRIES", "3"))
