"""Configuration for the layout engine."""

from dataclasses import dataclass

from forcegraph.config import Settings


@dataclass(frozen=True)
class LayoutConfig:
    """Canvas geometry and physics constants for one simulation."""

    # Canvas
    width: float = 960.0
    height: float = 540.0
    bounds_margin: float = 4.0  # Positions are clamped into [margin, dim - margin]

    # Forces
    repel_strength: float = 1500.0
    link_distance: float = 220.0  # Spring rest length
    spring_strength: float = 0.02
    center_strength: float = 0.005
    damping: float = 0.92  # Must stay < 1 to bleed energy
    time_step: float = 0.016
    max_velocity: float = 35.0
    distance_epsilon: float = 0.01

    # Initial placement
    init_margin: float = 16.0
    init_jitter: float = 0.2  # Total span, i.e. +-10% of a cell

    # Publishing
    publish_every: int = 2
    tick_interval: float = 1 / 60

    @property
    def center(self) -> tuple[float, float]:
        """Canvas center point."""
        return self.width / 2, self.height / 2

    @classmethod
    def from_settings(cls, settings: Settings) -> "LayoutConfig":
        """Build a layout config from application settings."""
        return cls(
            width=settings.canvas_width,
            height=settings.canvas_height,
            bounds_margin=settings.bounds_margin,
            repel_strength=settings.repel_strength,
            link_distance=settings.link_distance,
            spring_strength=settings.spring_strength,
            center_strength=settings.center_strength,
            damping=settings.damping,
            time_step=settings.time_step,
            max_velocity=settings.max_velocity,
            distance_epsilon=settings.distance_epsilon,
            init_margin=settings.init_margin,
            init_jitter=settings.init_jitter,
            publish_every=settings.publish_every,
            tick_interval=settings.tick_interval,
        )
