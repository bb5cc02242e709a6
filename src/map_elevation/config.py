"""Application configuration loaded from environment variables."""

import os
from dataclasses import dataclass

DEFAULT_ELEVATION_URL = (
    "https://elevation-api.arcgis.com/arcgis/rest/services/"
    "elevation-service/v1/elevation/at-many-points"
)
DEFAULT_GEOCODE_URL = (
    "https://geocode-api.arcgis.com/arcgis/rest/services/World/GeocodeServer"
)


@dataclass(frozen=True, slots=True)
class Settings:
    """Application settings populated from environment variables."""

    api_key: str = ""
    elevation_url: str = DEFAULT_ELEVATION_URL
    geocode_url: str = DEFAULT_GEOCODE_URL
    request_timeout: float = 10.0
    max_samples: int = 20
    batch_size: int = 100
    batch_pacing_seconds: float = 0.1
    ad_hoc_capacity: int = 10
    max_suggestions: int = 5
    suggest_bias_longitude: float = 106.8451
    suggest_bias_latitude: float = -6.2088
    default_spatial_reference: int = 3857
    transformer_cache_size: int = 32
    initial_zoom: int = 10
    search_zoom: int = 15

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables.

        Returns:
            A frozen Settings instance with values from the environment.
        """
        return cls(
            api_key=os.getenv("ARCGIS_API_KEY", ""),
            elevation_url=os.getenv("ELEVATION_SERVICE_URL", DEFAULT_ELEVATION_URL),
            geocode_url=os.getenv("GEOCODE_SERVICE_URL", DEFAULT_GEOCODE_URL),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10")),
            max_samples=int(os.getenv("MAX_SAMPLES", "20")),
            batch_size=int(os.getenv("ELEVATION_BATCH_SIZE", "100")),
            batch_pacing_seconds=float(os.getenv("ELEVATION_BATCH_PACING_SECONDS", "0.1")),
            ad_hoc_capacity=int(os.getenv("AD_HOC_CAPACITY", "10")),
            max_suggestions=int(os.getenv("MAX_SUGGESTIONS", "5")),
            suggest_bias_longitude=float(os.getenv("SUGGEST_BIAS_LONGITUDE", "106.8451")),
            suggest_bias_latitude=float(os.getenv("SUGGEST_BIAS_LATITUDE", "-6.2088")),
            default_spatial_reference=int(os.getenv("DEFAULT_SPATIAL_REFERENCE", "3857")),
            transformer_cache_size=int(os.getenv("TRANSFORMER_CACHE_SIZE", "32")),
            initial_zoom=int(os.getenv("INITIAL_ZOOM", "10")),
            search_zoom=int(os.getenv("SEARCH_ZOOM", "15")),
        )
