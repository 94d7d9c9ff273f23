from .logs import configure_logger, get_logger, trace

__all__ = ["configure_logger", "get_logger", "trace"]
