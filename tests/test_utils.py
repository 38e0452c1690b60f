import importlib.metadata

import pytest

from browserfetch import utils

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _reset_user_agent_cache():
    utils._USER_AGENT_CACHE = None
    yield
    utils._USER_AGENT_CACHE = None


def test_user_agent_uses_installed_version(mocker):
    mocker.patch("importlib.metadata.version", return_value="1.2.3")

    assert utils.get_user_agent() == "browserfetch/1.2.3"


def test_user_agent_unknown_version(mocker):
    mocker.patch(
        "importlib.metadata.version",
        side_effect=importlib.metadata.PackageNotFoundError("browserfetch"),
    )

    assert utils.get_user_agent() == "browserfetch/unknown"


def test_user_agent_is_cached(mocker):
    mock_version = mocker.patch("importlib.metadata.version", return_value="1.0.0")

    utils.get_user_agent()
    utils.get_user_agent()

    mock_version.assert_called_once_with("browserfetch")
