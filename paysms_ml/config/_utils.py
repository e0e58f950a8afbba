import os
from pathlib import Path

ENV_FILE_VARIABLE = "PAYSMS_ENV_FILE"

# Package directory -> project root (holds pyproject.toml and config/)
_PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _env_file_candidates(project_root: Path) -> list[Path]:
    """Env files in priority order.

    1. $PAYSMS_ENV_FILE (absolute, or relative to the project root)
    2. config/.env.dev (local development)
    3. config/.env (deployment)
    """
    candidates: list[Path] = []
    explicit = os.environ.get(ENV_FILE_VARIABLE)
    if explicit:
        path = Path(explicit)
        candidates.append(path if path.is_absolute() else project_root / path)
    config_dir = project_root / "config"
    candidates.extend([config_dir / ".env.dev", config_dir / ".env"])
    return candidates


def resolve_env_file_path(project_root: Path = _PROJECT_ROOT) -> Path | None:
    """First existing env file, or None to rely on the environment alone."""
    return next((p for p in _env_file_candidates(project_root) if p.is_file()), None)
