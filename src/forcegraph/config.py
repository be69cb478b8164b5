"""Configuration management using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Canvas geometry
    canvas_width: float = 960.0
    canvas_height: float = 540.0
    bounds_margin: float = Field(
        default=4.0,
        description="Hard clamp margin applied to node positions after every tick"
    )

    # Force simulation parameters
    repel_strength: float = 1500.0
    link_distance: float = Field(
        default=220.0,
        description="Rest length of link springs"
    )
    spring_strength: float = 0.02
    center_strength: float = 0.005
    damping: float = Field(
        default=0.92,
        gt=0.0,
        lt=1.0,
        description="Velocity multiplier applied once per tick"
    )
    time_step: float = Field(
        default=0.016,
        description="Fixed simulation step (~60 Hz)"
    )
    max_velocity: float = 35.0
    distance_epsilon: float = Field(
        default=0.01,
        description="Added to squared distances so coincident nodes still repel"
    )

    # Layout initializer
    init_margin: float = Field(
        default=16.0,
        description="Margin of the seeding grid"
    )
    init_jitter: float = Field(
        default=0.2,
        description="Jitter span as a fraction of grid cell size (0.2 = +-10%)"
    )

    # Simulation loop
    publish_every: int = Field(
        default=2,
        ge=1,
        description="Publish every Nth tick; every tick is still simulated"
    )
    tick_interval: float = Field(
        default=1 / 60,
        description="Seconds between scheduled ticks"
    )

    # Neo4j Configuration
    neo4j_uri: str = "bolt://localhost:7687"
    neo4j_user: str = "neo4j"
    neo4j_password: str = "neo4j_password"
    neo4j_database: str = "neo4j"
    default_graph_limit: int = Field(
        default=200,
        description="Row limit of the default graph query"
    )

    # Remote graph endpoint (HttpGraphSource)
    graph_api_url: str = "http://localhost:8000"
    graph_api_timeout: float = 30.0

    # Explorer
    explorer_autoload: bool = Field(
        default=True,
        description="Load the default graph when the API starts"
    )

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False


def get_dev_settings() -> Settings:
    """Get development environment settings."""
    return Settings(
        api_debug=True,
        default_graph_limit=100,
    )


def get_test_settings() -> Settings:
    """Get test environment settings."""
    return Settings(
        neo4j_database="neo4j_test",
        tick_interval=0.0,
    )


# Global settings instance
settings = Settings()
