"""
YAML document reading.

Every document fabricmap reads (simulation models, topology requests, saved
node dumps) goes through load_yaml_raw(). JSON parses as YAML, so request
documents may be written in either. Read failures are ValueError with the
path in the message; a missing file is FileNotFoundError.
"""

from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, TypeAdapter, ValidationError

M = TypeVar("M", bound=BaseModel)


def load_yaml_raw(path: Path | str) -> Any:
    """Parse a YAML/JSON document without validating its shape."""
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"File not found: {p}")

    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise ValueError(f"Unable to decode UTF-8 in {p}: {e}") from e
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {p}: {e}") from e

    if data is None:
        raise ValueError(f"Empty YAML file: {p}")
    return data


def load_yaml_typed(path: Path | str, *, model: type[M]) -> M:
    """Read a document and validate it into `model`.

    Example:
        load_yaml_typed("models/crusoe-small.yaml", model=SimModel)
    """
    data = load_yaml_raw(path)
    try:
        return TypeAdapter(model).validate_python(data)
    except ValidationError as e:
        # keep the path in the message, pydantic only knows field locations
        raise ValueError(f"Invalid structure in {path}: {e}") from e
