import pytest
import requests

from chainconf.utils.logger import logger
from chainconf.utils.custom_exceptions import ExceptionHandler


@pytest.fixture(autouse=True)
def log_to_tmp(tmp_path, monkeypatch):
    monkeypatch.setattr(logger, "log_file", str(tmp_path / "digest" / "logs.txt"))
    yield
    ExceptionHandler.initialize(True)


@pytest.fixture
def full_env():
    return {
        "DEPLOYER_PRIVATE_KEY": "0x" + "ab" * 32,
        "ETHERSCAN_API_KEY": "ETHERSCANKEY123",
    }


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def json(self):
        return self.payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")


@pytest.fixture
def fake_response():
    return FakeResponse
