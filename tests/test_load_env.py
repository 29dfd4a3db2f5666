import os
from pathlib import Path

from placefinder import config


def _parse_env_file(env_path: Path, *, override: bool = False) -> None:
    for line in env_path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, val = line.split("=", 1)
        key = key.strip()
        val = val.strip()
        if override or key not in os.environ:
            os.environ[key] = val


def test_load_env_is_optional_and_does_not_override_env(tmp_path: Path, monkeypatch):
    env_path = tmp_path / ".env"
    env_path.write_text("GOOGLE_MAPS_API_KEY=from-dotenv\nDEEPSEEK_API_KEY=from-dotenv\n", encoding="utf-8")

    called: dict[str, Path] = {}

    def fake_load_dotenv(*, dotenv_path, override=False):
        called["dotenv_path"] = Path(dotenv_path).resolve()
        _parse_env_file(Path(dotenv_path), override=bool(override))
        return True

    monkeypatch.setattr(config, "_load_dotenv", fake_load_dotenv)
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "from-env")
    monkeypatch.delenv("DEEPSEEK_API_KEY", raising=False)

    assert config.load_env(root_dir=tmp_path) is True

    assert called["dotenv_path"] == env_path.resolve()
    assert os.environ.get("GOOGLE_MAPS_API_KEY") == "from-env"
    assert os.environ.get("DEEPSEEK_API_KEY") == "from-dotenv"


def test_load_env_missing_file(tmp_path: Path):
    assert config.load_env(root_dir=tmp_path) is False


def test_settings_from_env_defaults():
    settings = config.Settings.from_env({})
    assert settings.google_maps_api_key == ""
    assert settings.anchor_location is None
    assert settings.anchor_enabled is False
    assert settings.deepseek_model == "deepseek-chat"
    assert settings.http_timeout_seconds == config.HTTP_TIMEOUT_SECONDS
    assert settings.max_results == 60


def test_settings_from_env_anchor_and_overrides():
    settings = config.Settings.from_env(
        {
            "GOOGLE_MAPS_API_KEY": " maps ",
            "PLACEFINDER_ANCHOR_LOCATION": "Times Square, New York",
            "PLACEFINDER_HTTP_TIMEOUT": "7.5",
        }
    )
    assert settings.google_maps_api_key == "maps"
    assert settings.anchor_enabled is True
    assert settings.http_timeout_seconds == 7.5

    disabled = config.Settings.from_env(
        {"PLACEFINDER_ANCHOR_LOCATION": "Times Square", "PLACEFINDER_USE_ANCHOR": "false"}
    )
    assert disabled.anchor_enabled is False

    bad_timeout = config.Settings.from_env({"PLACEFINDER_HTTP_TIMEOUT": "soon"})
    assert bad_timeout.http_timeout_seconds == config.HTTP_TIMEOUT_SECONDS
