from .loader import load_yaml_raw, load_yaml_typed
from .models import load_model, load_request

__all__ = [
    "load_model",
    "load_request",
    "load_yaml_raw",
    "load_yaml_typed",
]
