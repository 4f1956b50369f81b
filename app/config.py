import os
from dotenv import load_dotenv

load_dotenv(dotenv_path=".env")

# Supabase
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

# JWT verification
SUPABASE_JWT_AUDIENCE = os.getenv("SUPABASE_JWT_AUDIENCE", "authenticated")
JWKS_CACHE_SECONDS = int(os.getenv("JWKS_CACHE_SECONDS", "3600"))

# Roles
SUPERADMIN_ROLE = os.getenv("SUPERADMIN_ROLE", "superadmin")

# Completion / checkout behaviour
ALLOW_NON_ATOMIC_COMPLETION = os.getenv("ALLOW_NON_ATOMIC_COMPLETION", "false").lower() in ("1", "true", "yes")
CHECKOUT_ACQUIRE_ATTEMPTS = int(os.getenv("CHECKOUT_ACQUIRE_ATTEMPTS", "3"))

# Server
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ALLOW_ORIGINS = [o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]
