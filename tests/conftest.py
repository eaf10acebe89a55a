import logging

import pytest

from spinnaker_examples.config import ExampleConfig
from spinnaker_examples.driver import SpinSystem

from .fake_spinnaker import FakeCamera, FakeSpinnaker


@pytest.fixture
def logger():
  return logging.getLogger("spinnaker_examples.test")


@pytest.fixture
def camera():
  return FakeCamera()


@pytest.fixture
def sdk(camera):
  return FakeSpinnaker([camera])


@pytest.fixture
def system(sdk, logger):
  system = SpinSystem(sdk, logger)
  yield system
  system.release()


@pytest.fixture
def config(tmp_path):
  config = ExampleConfig()
  config.acquisition.output_dir = str(tmp_path / "images")
  config.acquisition.num_images = 3

  config.buffer_handling.settle_sec = 0.0
  config.buffer_handling.loop_interval_sec = 0.0

  config.image_events.wait_interval_sec = 0.01
  config.image_events.timeout_sec = 5.0
  config.enumeration_events.duration_sec = 0.01
  return config
