from pathlib import Path

from embedsearch.config import Settings


def test_environment_overrides_defaults(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("EMBEDSEARCH_DIMENSION", "256")
    monkeypatch.setenv("EMBEDSEARCH_QUANTIZATION", "max_abs")
    monkeypatch.setenv("EMBEDSEARCH_SEARCH_WORKERS", "4")

    settings = Settings(data_dir=tmp_path)

    assert settings.dimension == 256
    assert settings.quantization == "max_abs"
    assert settings.search_workers == 4


def test_database_path_defaults_into_data_dir(tmp_path: Path) -> None:
    settings = Settings(data_dir=tmp_path / "data")

    assert settings.get_database_path() == tmp_path / "data" / "documents.db"
    assert (tmp_path / "data").is_dir()


def test_explicit_database_path_wins(tmp_path: Path) -> None:
    settings = Settings(data_dir=tmp_path, database_path=tmp_path / "custom.db")

    assert settings.get_database_path() == tmp_path / "custom.db"


def test_isaacus_key_is_secret(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv("ISAACUS_API_KEY", raising=False)
    settings = Settings(data_dir=tmp_path, isaacus_api_key="sk-test")

    assert "sk-test" not in repr(settings)
    assert settings.get_isaacus_api_key() == "sk-test"


def test_isaacus_key_falls_back_to_vendor_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ISAACUS_API_KEY", "sk-env")

    assert Settings(data_dir=tmp_path).get_isaacus_api_key() == "sk-env"
