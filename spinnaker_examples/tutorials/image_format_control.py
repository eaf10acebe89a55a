""" Custom image format: pixel format, offsets to their minimum, full width and height.

Each setting is optional, a node which can't be written is reported and skipped.
"""
from functools import partial
from logging import Logger
import logging

from beartype.typing import Callable, List, Tuple

from spinnaker_examples.config import ExampleConfig, ImageFormatSettings
from spinnaker_examples.driver import Camera, SpinSystem, NodeMap
from spinnaker_examples.image import ImageSaver

from . import common


def image_format_settings(nodemap:NodeMap, settings:ImageFormatSettings) -> List[Tuple[str, Callable[[], object]]]:
  """ Ordered (node, value getter) pairs.

  Offsets must be reduced before the size is increased, and the maximum width
  and height depend on the offsets, so each value is only read just before it
  is written.
  """
  def bound(name, index):
    return lambda: nodemap.value_range(name)[index] if nodemap.is_readable(name) else None

  return [
    ("PixelFormat", lambda: settings.pixel_format),
    ("OffsetX", bound("OffsetX", 0)),
    ("OffsetY", bound("OffsetY", 0)),
    ("Width", bound("Width", 1)),
    ("Height", bound("Height", 1)),
  ]


@common.step
def configure_image_format(camera:Camera, settings:ImageFormatSettings):
  camera.logger.info("*** CONFIGURING CUSTOM IMAGE SETTINGS ***")
  nodemap = camera.nodemap

  for name, get_value in image_format_settings(nodemap, settings):
    value = get_value()
    if value is None or not nodemap.is_writable(name):
      camera.log(logging.WARNING, f"{name} not available...")
    elif nodemap.try_set_value(name, value):
      camera.log(logging.INFO, f"{name} set to {nodemap.get_value(name)}...")
    else:
      camera.log(logging.WARNING, f"{name} {value} not available...")


def run_single_camera(camera:Camera, config:ExampleConfig, saver:ImageSaver) -> bool:
  settings = config.acquisition
  result = camera.log_device_info()

  with camera.initialized():
    if not configure_image_format(camera, config.image_format):
      return False

    result &= common.acquire_images(camera, saver, "ImageFormatControl",
      settings.num_images, settings.timeout_ms)

  return result


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  saver = ImageSaver.from_settings(system.sdk, config.acquisition)
  return common.run_each_camera(system, logger,
    partial(run_single_camera, config=config, saver=saver),
    output_dir=config.acquisition.output_dir)
