from pydantic import SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    documents_dir: str = "documents"
    index_path: str = "output/index.json"

    # Chunking (characters)
    chunk_size: int = 500
    chunk_overlap: int = 50

    # Retrieval
    search_top_k: int = 5
    search_threshold: float = 0.3

    openai_api_key: SecretStr = SecretStr("")
    embedding_model: str = "text-embedding-3-small"
    embedding_dimension: int = 1536
    embedding_base_url: str = "https://api.openai.com/v1/embeddings"
    embedding_batch_size: int = 20
    embedding_timeout: float = 60.0

    log_level: str = "INFO"

    @field_validator("chunk_size")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("chunk_size must be positive")
        return v

    @field_validator("chunk_overlap")
    @classmethod
    def validate_chunk_overlap(cls, v: int, info: ValidationInfo) -> int:
        """
        Overlap may be 0 but must stay below chunk_size.
        """
        if v < 0:
            raise ValueError("chunk_overlap must be >= 0")

        # chunk_size is absent here when its own validation failed
        chunk_size = info.data.get("chunk_size")
        if chunk_size is not None and v >= chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return v


settings = Settings()
