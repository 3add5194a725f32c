#!/usr/bin/env python3
"""Validate store snapshot YAML files against the schema."""
import sys
from pathlib import Path

import yaml
from jsonschema import Draft7Validator, ValidationError


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def check_references(data: dict) -> list[str]:
    """Cross-record checks the schema cannot express."""
    errors = []
    model_ids = set()
    interval_ids = set()
    for model in data.get("models") or []:
        model_ids.add(model["id"])
        for interval in model.get("intervals") or []:
            interval_ids.add(interval["id"])

    asset_ids = set()
    plant_ids = set()
    for bu in data.get("businessUnits") or []:
        for plant in bu.get("plants") or []:
            plant_ids.add(plant["id"])
            for asset in plant.get("assets") or []:
                asset_ids.add(asset["id"])
                if asset["modelId"] not in model_ids:
                    errors.append(f"Asset {asset['id']}: unknown model '{asset['modelId']}'")

    for i, entry in enumerate(data.get("maintenanceHistory") or []):
        if entry["assetId"] not in asset_ids:
            errors.append(f"maintenanceHistory[{i}]: unknown asset '{entry['assetId']}'")
        if entry.get("intervalId") and entry["intervalId"] not in interval_ids:
            errors.append(f"maintenanceHistory[{i}]: unknown interval '{entry['intervalId']}'")

    for i, assignment in enumerate(data.get("plantAssignments") or []):
        if assignment["plantId"] not in plant_ids:
            errors.append(f"plantAssignments[{i}]: unknown plant '{assignment['plantId']}'")
    return errors


def validate_snapshot_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single snapshot YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        Draft7Validator(schema).validate(data)
        errors.extend(check_references(data))
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except OSError as e:
        errors.append(f"Error: {e}")
    return errors


def main(argv=None):
    """Validate all snapshot YAML files in the snapshots/ directory (or given paths)."""
    schema = load_schema()
    args = sys.argv[1:] if argv is None else argv

    if args:
        yaml_files = [Path(a) for a in args]
    else:
        snapshots_dir = Path(__file__).parent / "snapshots"
        if not snapshots_dir.exists():
            print(f"Error: snapshots directory not found: {snapshots_dir}")
            return 1
        yaml_files = list(snapshots_dir.glob("*.yaml")) + list(snapshots_dir.glob("*.yml"))
        if not yaml_files:
            print(f"Warning: No YAML files found in {snapshots_dir}")
            return 0

    all_valid = True
    for filepath in sorted(yaml_files):
        errors = validate_snapshot_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath.name}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
