import os
from pathlib import Path
from typing import Dict, Optional

ENV_FILE_VARIABLE = "DBGATEWAY_ENV_FILE"


def parse_env_file(env_file: Path) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for raw_line in env_file.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key:
            values[key] = value.strip().strip("'").strip('"')
    return values


def load_environments(env_path: Optional[str] = None) -> None:
    """Copy ``.env`` entries into ``os.environ`` without overriding real variables."""
    env_file = Path(env_path or os.getenv(ENV_FILE_VARIABLE, ".env"))
    if not env_file.exists():
        return

    for key, value in parse_env_file(env_file).items():
        if key not in os.environ:
            os.environ[key] = value
