from .json_io import load_events, save_events, save_json
from .config_loader import load_config, build_statistics_plan, check_statistics

__all__ = ["load_events", "save_events", "save_json", "load_config", "build_statistics_plan", "check_statistics"]
