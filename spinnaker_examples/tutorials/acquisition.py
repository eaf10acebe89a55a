""" Continuous acquisition from each camera, converting and saving every image.

The host stream mode and (for GigE cameras) the control channel heartbeat are
configured before acquisition starts.
"""
from functools import partial
from logging import Logger

from spinnaker_examples.config import ExampleConfig
from spinnaker_examples.driver import Camera, SpinSystem
from spinnaker_examples.image import ImageSaver

from . import common


def run_single_camera(camera:Camera, config:ExampleConfig, saver:ImageSaver) -> bool:
  settings = config.acquisition
  result = camera.log_device_info()

  with camera.initialized():
    try:
      if not common.prepare_stream(camera, settings):
        return False

      result &= common.acquire_images(camera, saver, "Acquisition",
                                      settings.num_images, settings.timeout_ms)
    finally:
      # The heartbeat may have been disabled even when preparation failed
      result &= common.restore_stream(camera, settings)

  return result


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  saver = ImageSaver.from_settings(system.sdk, config.acquisition)
  return common.run_each_camera(system, logger,
    partial(run_single_camera, config=config, saver=saver),
    output_dir=config.acquisition.output_dir)
