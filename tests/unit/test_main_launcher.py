import runpy
from unittest.mock import patch

import pytest

from apartment_api import config


@pytest.mark.unit
def test_running_main_serves_the_app_on_the_configured_port() -> None:
    with patch("uvicorn.run") as run:
        namespace = runpy.run_module("apartment_api.main", run_name="__main__")

    run.assert_called_once_with(namespace["app"], host="0.0.0.0", port=config.PORT)
