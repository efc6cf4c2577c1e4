"""Export JSON schemas for the generation contract and the saved trip document."""

import json
from pathlib import Path

from pydantic import BaseModel

from backend.app.models import Itinerary, SavedTrip, TripPreferences

CONTRACT_MODELS: list[type[BaseModel]] = [Itinerary, TripPreferences, SavedTrip]


def export_schemas(schemas_dir: Path) -> list[Path]:
    """Write one <Model>.schema.json per contract model into schemas_dir."""
    schemas_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for model in CONTRACT_MODELS:
        path = schemas_dir / f"{model.__name__}.schema.json"
        with open(path, "w") as f:
            json.dump(model.model_json_schema(by_alias=True), f, indent=2)
        written.append(path)
    return written


def main() -> None:
    """Export schemas to docs/schemas/."""
    for path in export_schemas(Path("docs/schemas")):
        print(f"Exported schema to {path}")


if __name__ == "__main__":
    main()
