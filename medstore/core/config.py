from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str

    # JWT Authentication
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ADMIN_TOKEN_EXPIRE_HOURS: int = 24

    # Admin session cookie
    ADMIN_COOKIE_NAME: str = "admin-token"
    COOKIE_SECURE: bool = False

    # Shop Configuration
    SHOP_NAME: str = "RAMMED Medical Equipment"
    DEFAULT_CURRENCY: str = "INR"

    # Analytics
    ANALYTICS_DEFAULT_WINDOW_DAYS: int = 30
    ANALYTICS_TOP_PRODUCTS_LIMIT: int = 10
    ANALYTICS_RECENT_ORDERS_LIMIT: int = 10

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
