import pytest

from xelhua.config import reset_settings
from xelhua.config.settings import ENV_OVERRIDES


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """每个测试使用默认设置，不受本机配置文件和环境变量影响"""
    for env_key in ENV_OVERRIDES:
        monkeypatch.delenv(env_key, raising=False)
    monkeypatch.setenv("XELHUA_CONFIG", str(tmp_path / "xelhua.json"))
    reset_settings()
    yield
    reset_settings()
