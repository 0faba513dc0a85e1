from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    supabase_url: str = ""
    supabase_key: str = ""
    openai_api_key: str = ""
    perplexity_api_key: str = ""

    embedding_model: str = "text-embedding-ada-002"
    research_model: str = "sonar"
    vector_match_threshold: float = 0.6
    search_limit: int = 10

    # Upper bound on each external call made while building a report
    collaborator_timeout_seconds: float = 30.0

    store_dir: str = ".revintel/sessions"
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "REVINTEL_"
