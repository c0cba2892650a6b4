from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "RENTMAP_"}

    # Dataset location. An empty base URL reads from data_dir instead of HTTP.
    data_dir: str = "data"
    data_base_url: str = ""
    http_timeout_seconds: float = 15.0

    # Dataset file names (relative to data_dir or data_base_url)
    crime_file: str = "crime-data-processed.json"
    rent_file: str = "rent-data-processed.json"
    schools_file: str = "schools.geojson"
    parks_file: str = "parks.geojson"
    neighbourhoods_file: str = "neighbourhoods.geojson"

    # Offline-generated neighbourhood -> rent zone artifact
    zone_mapping_file: str = "neighbourhood-to-rent-zone.json"

    # Optional JSON override for the district -> zone heuristic table
    district_zones_path: str = ""

    # App
    debug: bool = False
    log_level: str = "INFO"


settings = Settings()
