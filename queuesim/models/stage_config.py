"""Stage and scenario configuration."""

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple


class InvalidConfigurationError(ValueError):
    """Raised when a scenario configuration violates a model constraint."""


def _parse_range(value: Sequence, label: str) -> Tuple[float, float]:
    """Turn a two-element list from YAML into a ``(min, max)`` tuple."""
    try:
        low, high = value
        low, high = float(low), float(high)
    except (TypeError, ValueError) as e:
        raise InvalidConfigurationError(
            f"{label} must be a [min, max] pair, got {value!r}"
        ) from e
    if low < 0 or low > high:
        raise InvalidConfigurationError(
            f"{label} must satisfy 0 <= min <= max, got ({low}, {high})"
        )
    return low, high


@dataclass
class StageConfig:
    """Configuration for one service station.

    An ``arrival_range`` of ``(0, 0)`` marks a stage without its own
    external arrival stream (it is fed by the upstream stage).
    """

    name: str
    servers: int
    capacity: int
    arrival_range: Tuple[float, float]
    service_range: Tuple[float, float]

    @classmethod
    def from_dict(cls, config: Dict, index: int = 0) -> "StageConfig":
        """Initialize from a configuration dictionary.

        Args:
            config: Stage section of a scenario config
            index: Position of the stage, used for the default name

        Returns:
            Validated stage configuration

        Raises:
            InvalidConfigurationError: If a constraint is violated
        """
        name = config.get('name', f"stage{index + 1}")
        try:
            servers = int(config['servers'])
            capacity = int(config['capacity'])
        except KeyError as e:
            raise InvalidConfigurationError(f"Stage '{name}' is missing {e}") from e

        if servers < 1:
            raise InvalidConfigurationError(
                f"Stage '{name}' needs at least one server, got {servers}"
            )
        if capacity < servers:
            raise InvalidConfigurationError(
                f"Stage '{name}' capacity ({capacity}) is below its server count ({servers})"
            )

        arrival_range = _parse_range(config.get('arrival_range', (0.0, 0.0)),
                                     f"Stage '{name}' arrival_range")
        service_range = _parse_range(config.get('service_range'),
                                     f"Stage '{name}' service_range")

        return cls(
            name=name,
            servers=servers,
            capacity=capacity,
            arrival_range=arrival_range,
            service_range=service_range,
        )

    @property
    def has_external_arrivals(self) -> bool:
        return self.arrival_range != (0.0, 0.0)


def validate_config(config: Dict) -> List[StageConfig]:
    """Check a full scenario configuration.

    Args:
        config: Scenario configuration dictionary

    Returns:
        Parsed stage configurations, in network order

    Raises:
        InvalidConfigurationError: If any section is malformed
    """
    random_cfg = config.get('random', {})
    if int(random_cfg.get('modulus', 1)) <= 0:
        raise InvalidConfigurationError("random.modulus must be positive")
    if int(random_cfg.get('seed', 0)) < 0:
        raise InvalidConfigurationError("random.seed must be non-negative")

    budget = config.get('simulation', {}).get('draw_budget', 0)
    if int(budget) < 0:
        raise InvalidConfigurationError("simulation.draw_budget must be non-negative")

    stages = config.get('stages') or []
    if not 1 <= len(stages) <= 2:
        raise InvalidConfigurationError(
            f"A scenario has one or two stages, got {len(stages)}"
        )

    stage_configs = [StageConfig.from_dict(s, i) for i, s in enumerate(stages)]

    if not stage_configs[0].has_external_arrivals:
        raise InvalidConfigurationError(
            f"Stage '{stage_configs[0].name}' needs an external arrival_range"
        )
    if len(stage_configs) == 2 and stage_configs[1].has_external_arrivals:
        raise InvalidConfigurationError(
            f"Stage '{stage_configs[1].name}' is fed by the upstream stage; "
            "its arrival_range must be [0, 0]"
        )

    return stage_configs
