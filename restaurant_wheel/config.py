import os


def _csv(name: str, default: str = "") -> list[str]:
    raw = os.environ.get(name, default)
    return [v.strip().lower() for v in raw.split(",") if v.strip()]


def _database_url() -> str:
    url = os.environ.get("DATABASE_URL")
    if url:
        return url
    return (
        f"postgresql+psycopg2://{os.environ.get('PGUSER', 'postgres')}:{os.environ.get('PGPASSWORD', '')}"
        f"@{os.environ.get('PGHOST', '127.0.0.1')}:{os.environ.get('PGPORT', '5432')}/{os.environ.get('PGDATABASE', 'wheel')}"
    )


class Config:
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")

    # Bearer tokens: Auth0 (JWKS) when AUTH0_DOMAIN is set, otherwise a shared HS256 secret
    AUTH0_DOMAIN = os.environ.get("AUTH0_DOMAIN")
    AUTH0_API_IDENTIFIER = os.environ.get("AUTH0_API_IDENTIFIER")
    JWT_SECRET = os.environ.get("JWT_SECRET")
    JWT_ISSUER = os.environ.get("JWT_ISSUER")

    ADMIN_EMAILS = _csv("ADMIN_EMAILS")
    WHITELISTED_EMAILS = _csv("WHITELISTED_EMAILS")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Fixed seed makes wheel spins reproducible; unset means system entropy
    WHEEL_SEED = os.environ.get("WHEEL_SEED")
