""" Manual exposure: turn off auto exposure, set a fixed exposure time, restore afterwards.

The grab timeout has to cover the exposure, so it is derived from the exposure
time actually applied.
"""
from functools import partial
from logging import Logger
import logging

from spinnaker_examples.config import ExampleConfig, ExposureSettings
from spinnaker_examples.driver import Camera, SpinSystem
from spinnaker_examples.driver.helpers import clamp
from spinnaker_examples.image import ImageSaver

from . import common


def exposure_timeout_ms(exposure_time_us:float) -> int:
  return int(exposure_time_us / 1000 + 1000)


@common.step
def configure_exposure(camera:Camera, settings:ExposureSettings):
  camera.logger.info("*** CONFIGURING EXPOSURE ***")
  nodemap = camera.nodemap

  nodemap.set_value("ExposureAuto", "Off")
  camera.log(logging.INFO, "Automatic exposure disabled...")

  # Ensure the desired exposure time does not exceed the maximum
  lower, upper = nodemap.value_range("ExposureTime")
  nodemap.set_value("ExposureTime", clamp(settings.exposure_time_us, lower, upper))
  camera.log(logging.INFO, f"Exposure time set to {nodemap.get_value('ExposureTime')} us...")


@common.step
def reset_exposure(camera:Camera):
  camera.nodemap.set_value("ExposureAuto", "Continuous")
  camera.log(logging.INFO, "Automatic exposure enabled...")


def run_single_camera(camera:Camera, config:ExampleConfig, saver:ImageSaver) -> bool:
  settings = config.exposure
  result = camera.log_device_info()

  with camera.initialized():
    if not configure_exposure(camera, settings):
      return False

    timeout_ms = exposure_timeout_ms(camera.nodemap.get_value("ExposureTime"))
    result &= common.acquire_images(camera, saver, "Exposure", settings.num_images, timeout_ms)
    result &= reset_exposure(camera)

  return result


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  saver = ImageSaver.from_settings(system.sdk, config.acquisition)
  return common.run_each_camera(system, logger,
    partial(run_single_camera, config=config, saver=saver),
    output_dir=config.acquisition.output_dir)
