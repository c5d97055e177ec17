import yaml
import os
from typing import List, Optional
from pydantic import BaseModel, Field


class ResolverConfig(BaseModel):
    """Configuration for the coverage resolver."""
    # Window (days before expiry) in which a usable holding counts as expiring soon
    expiring_soon_days: int = Field(default=180, ge=0)


class ScorerConfig(BaseModel):
    """
    Configuration for the scoring engine.

    Used when a requirement set is built without an explicit threshold
    (e.g. from job context or a YAML job file).
    """
    default_minimum_match_score: int = Field(default=70, ge=0, le=100)


class RecommendationConfig(BaseModel):
    """
    Configuration for gap estimates and recommendation ranking.

    urgency = (priority_weight * priority + improvement_weight * min(100, scale * delta))
              / (1 + unmet prerequisites), plus a bonus for near deadlines.
    """
    enabled: bool = True
    max_recommendations: int = Field(default=10, ge=0)
    urgency_priority_weight: float = 0.7
    urgency_improvement_weight: float = 0.3
    improvement_scale: float = 2.0

    # Requirements with a required_by inside this window get a bonus
    deadline_window_days: int = 30
    deadline_bonus: int = 10

    # Renewing an expired certificate is cheaper and faster than a first attempt
    renewal_time_factor: float = 0.5
    renewal_cost_factor: float = 0.7

    # Fallbacks when a catalog entry carries no estimate
    default_days_to_obtain: int = 30
    default_cost: float = 200.0


class BatchConfig(BaseModel):
    """Configuration for batch evaluation fan-out."""
    max_workers: int = Field(default=4, ge=1)


class CatalogEntryConfig(BaseModel):
    """One certificate type as declared in a YAML catalog file."""
    id: str
    display_name: str
    level: str = "basic"
    category: str = "security"
    validity_days: int = Field(default=1825, gt=0)
    equivalent_names: List[str] = Field(default_factory=list)
    match_weight: int = Field(default=50, ge=0, le=100)
    is_mandatory_baseline: bool = False
    prerequisites: List[str] = Field(default_factory=list)
    estimated_days_to_obtain: Optional[int] = None
    estimated_cost: Optional[float] = None
    training_providers: List[str] = Field(default_factory=list)


class CatalogFileConfig(BaseModel):
    """Root of a YAML catalog file."""
    certificates: List[CatalogEntryConfig] = Field(default_factory=list)


class CatalogConfig(BaseModel):
    """Where the catalog comes from. None means the built-in Dutch catalog."""
    catalog_file: Optional[str] = None


class EngineConfig(BaseModel):
    """
    Top-level engine configuration.
    """
    # Exclude unknown catalog references (with a warning) instead of failing
    lenient: bool = False

    # How long a MatchResult stays valid before it must be recomputed
    result_valid_for_hours: Optional[int] = 24

    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    scorer: ScorerConfig = Field(default_factory=ScorerConfig)
    recommendations: RecommendationConfig = Field(default_factory=RecommendationConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config(config_path: str = "config.yaml") -> EngineConfig:
    # If not found at relative path (e.g. running from root), try the repo root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}

    # Allow env var override for lenient mode
    env_lenient = os.environ.get("CERTMATCH_LENIENT")
    if env_lenient:
        data['lenient'] = _env_flag(env_lenient)

    # Allow env var override for the catalog file
    env_catalog_file = os.environ.get("CERTMATCH_CATALOG_FILE")
    if env_catalog_file:
        if 'catalog' not in data or data['catalog'] is None:
            data['catalog'] = {}
        data['catalog']['catalog_file'] = env_catalog_file

    # Allow env var override for batch parallelism
    env_max_workers = os.environ.get("CERTMATCH_MAX_WORKERS")
    if env_max_workers:
        if 'batch' not in data or data['batch'] is None:
            data['batch'] = {}
        data['batch']['max_workers'] = int(env_max_workers)

    return EngineConfig(**data)
