"""Application configuration."""

from typing import Annotated, Any, Literal, Self

from pydantic import (
    AnyUrl,
    BaseModel,
    BeforeValidator,
    Field,
    HttpUrl,
    computed_field,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class ArtSourceConfig(BaseModel):
    """单个博物馆源的配置。"""

    enabled: bool = True
    weight: int = Field(default=1, ge=0, description="相对权重，0 表示不参与选择")
    styles: list[str] = Field(default_factory=list, description="ARTIC 风格白名单")
    departments: list[int] = Field(default_factory=list, description="Met 部门 ID")
    has_images: bool = True
    type: str | None = Field(default=None, description="Cleveland 作品类型")


def _default_art_sources() -> dict[str, ArtSourceConfig]:
    return {
        "artic": ArtSourceConfig(
            enabled=True,
            weight=35,
            styles=[
                "Cubism",
                "Expressionism",
                "Surrealism",
                "Abstract",
                "Minimalism",
                "Constructivism",
                "Symbolism",
                "Suprematism",
                "Bauhaus",
            ],
        ),
        "met": ArtSourceConfig(
            enabled=True,
            weight=35,
            has_images=True,
            # European Paintings, The American Wing, Drawings/Prints, Photographs
            departments=[11, 21, 26, 30],
        ),
        "cleveland": ArtSourceConfig(enabled=True, weight=20, type="Painting"),
    }


DEFAULT_RELIGIOUS_KEYWORDS: list[str] = [
    "christ", "jesus", "virgin", "madonna", "saint", "holy", "biblical", "bible",
    "apostle", "crucifixion", "resurrection", "nativity", "annunciation", "pieta",
    "crucified", "crucifix", "altar", "cathedral", "church", "monastery", "temple",
    "buddha", "buddhist", "hindu", "shiva", "vishnu", "krishna", "religious",
    "mosque", "islamic", "muhammad", "prophet", "divine", "deity", "god", "angel",
    "archangel", "gospel", "scripture", "sermon", "prayer", "blessing", "baptism",
    "communion", "eucharist", "sacred", "patron saint",
]  # fmt: skip


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "Lifestack"
    SERVER_PORT: int = 3000
    ROOTPATH: str = ""
    API_PREFIX: str = "/api"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []

    @computed_field
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS]

    CORS_ALLOW_METHODS: list[str] = ["GET", "POST"]
    CORS_ALLOW_HEADERS: list[str] = ["*"]

    # Sentry
    SENTRY_DSN: HttpUrl | None = None

    # Cache
    CACHE_BACKEND: Literal["memory", "redis"] = "memory"
    MEMORY_CACHE_MAX_ENTRIES: int = 1024
    REDIS_URL: str = "redis://localhost:6379/0"

    # Outbound HTTP
    FETCHER_USER_AGENT: str = "Dashboard-App/1.0 (contact@example.com)"
    ART_FETCH_TIMEOUT_SEC: float = 10.0

    # Art pool & rotation
    ART_POOL_SIZE: int = Field(default=12, ge=1)
    ART_POOL_TTL_SECONDS: int = Field(default=3600, ge=1)  # 1 hour
    ART_RETRY_DELAY_MS: int = Field(default=500, ge=0)
    ART_ROTATION_INTERVALS: dict[str, int] = {
        "portrait": 300,  # 5 minutes
        "landscape": 420,  # 7 minutes
        "tv": 360,  # 6 minutes
    }
    ART_DEFAULT_ORIENTATION: str = "landscape"
    ART_SOURCES: dict[str, ArtSourceConfig] = Field(
        default_factory=_default_art_sources
    )
    ART_RELIGIOUS_KEYWORDS: list[str] = Field(
        default_factory=lambda: list(DEFAULT_RELIGIOUS_KEYWORDS)
    )

    @computed_field
    @property
    def art_source_weights(self) -> dict[str, int]:
        """已启用源的权重表（保持配置顺序）。"""
        return {
            key: source.weight
            for key, source in self.ART_SOURCES.items()
            if source.enabled
        }

    @model_validator(mode="after")
    def _check_rotation_intervals(self) -> Self:
        for orientation, seconds in self.ART_ROTATION_INTERVALS.items():
            if seconds <= 0:
                raise ValueError(
                    f"Rotation interval for {orientation} must be positive"
                )
        if self.ART_DEFAULT_ORIENTATION not in self.ART_ROTATION_INTERVALS:
            raise ValueError(
                "ART_DEFAULT_ORIENTATION must be a key of ART_ROTATION_INTERVALS"
            )
        return self


settings = Settings()
