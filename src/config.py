from pydantic_settings import BaseSettings, SettingsConfigDict

# Pooled across title, headings, meta description and body text before counting
DEFAULT_STOP_WORDS = [
    "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "are", "was", "were", "this", "that", "these", "those", "from", "you", "your",
    "our", "its", "has", "have", "had", "not", "can", "will", "all", "any", "also",
    "into", "than", "then", "there", "their", "they", "them", "what", "which",
    "who", "how", "when", "where", "why", "been", "being", "more", "most", "such",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "PageLens"
    debug: bool = False
    cors_origins: list[str] = ["*"]

    # Fetching
    user_agent: str = "Mozilla/5.0 (compatible; PageLensBot/1.0; +https://pagelens.example/bot)"
    fetch_timeout: float = 15
    max_redirects: int = 5
    auxiliary_timeout: float = 5

    # Link probing
    probe_timeout: float = 5
    probe_max_redirects: int = 3
    probe_limit: int = 20
    probe_concurrency: int = 10

    # Keywords
    keyword_text_limit: int = 5000
    keyword_limit: int = 20
    stop_words: list[str] = DEFAULT_STOP_WORDS

    # Google PageSpeed Insights
    google_api_key: str | None = None
    pagespeed_timeout: float = 30

    # OpenAI completions
    openai_api_key: str | None = None
    openai_model: str = "gpt-3.5-turbo"
    completion_timeout: float = 30

    # Customer store (in-memory SQLite lives as long as the process)
    database_url: str = "sqlite://"
    max_customers: int = 1000
    access_validity_days: int = 365
    default_payment_amount: float = 97
    seed_demo_customer: bool = False


settings = Settings()
