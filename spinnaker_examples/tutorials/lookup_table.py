""" Lookup tables: map each pixel value through a user defined table on the camera.

A linear table is written (so images look unchanged), enabled for the
acquisition and disabled afterwards. Not every camera model has a LUT.
"""
from functools import partial
from logging import Logger
import logging

from spinnaker_examples.config import ExampleConfig, LookupTableSettings
from spinnaker_examples.driver import Camera, SpinSystem
from spinnaker_examples.image import ImageSaver, linear_lut

from . import common


@common.step
def configure_lookup_table(camera:Camera, settings:LookupTableSettings):
  camera.logger.info("*** CONFIGURING LOOKUP TABLE ***")
  nodemap = camera.nodemap

  nodemap.set_value("LUTSelector", "LUT1")
  camera.log(logging.INFO, "Lookup table selector set to LUT 1...")

  max_range = int(nodemap.value_range("LUTValue")[1]) + 1
  table = linear_lut(max_range, settings.num_entries)
  camera.logger.info(f"\tMaximum range: {max_range}")
  camera.logger.info(f"\tIncrement: {max(max_range // settings.num_entries, 1)}")

  for index, value in table:
    nodemap.set_value("LUTIndex", int(index))
    nodemap.set_value("LUTValue", int(value))
  camera.log(logging.INFO, f"All {len(table)} lookup table values set...")

  nodemap.set_value("LUTEnable", True)
  camera.log(logging.INFO, "Lookup tables enabled.")


@common.step
def reset_lookup_table(camera:Camera):
  camera.nodemap.set_value("LUTEnable", False)
  camera.log(logging.INFO, "Lookup tables disabled.")


def run_single_camera(camera:Camera, config:ExampleConfig, saver:ImageSaver) -> bool:
  settings = config.acquisition
  result = camera.log_device_info()

  with camera.initialized():
    if not configure_lookup_table(camera, config.lookup_table):
      camera.logger.warning("The lookup table may not be available on all camera models, "
        "please try a Blackfly S camera.")
      return False

    result &= common.acquire_images(camera, saver, "LookupTable",
      settings.num_images, settings.timeout_ms)
    result &= reset_lookup_table(camera)

  return result


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  saver = ImageSaver.from_settings(system.sdk, config.acquisition)
  return common.run_each_camera(system, logger,
    partial(run_single_camera, config=config, saver=saver),
    output_dir=config.acquisition.output_dir)
