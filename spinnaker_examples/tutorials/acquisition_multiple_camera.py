""" Acquire from every camera at once, grabbing one image from each in turn.

All cameras are initialized and started before the first grab, then images
are collected round-robin so no single camera is drained first.
"""
from contextlib import ExitStack
from logging import Logger
import logging

from beartype.typing import List

from spinnaker_examples.config import ExampleConfig
from spinnaker_examples.driver import Camera, SpinSystem
from spinnaker_examples.image import ImageSaver

from . import common


PREFIX = "AcquisitionMultipleCamera"


def camera_label(camera:Camera) -> str:
  serial = camera.serial
  return serial if serial != "" else str(camera.index)


@common.step
def start_camera(camera:Camera, config:ExampleConfig):
  camera.set_acquisition_mode("Continuous")
  return common.prepare_stream(camera, config.acquisition)


def grab_one(camera:Camera, saver:ImageSaver, i:int, timeout_ms:int) -> bool:
  try:
    image = camera.next_image(timeout_ms)
    try:
      if image.IsIncomplete():
        camera.log(logging.WARNING, f"Image incomplete with image status {image.GetImageStatus()}...")
        return True

      camera.log(logging.INFO, f"Grabbed image {i}, width = {image.GetWidth()}, height = {image.GetHeight()}")
      filename = saver.save(image, PREFIX, i, camera_label(camera))
      camera.log(logging.INFO, f"Image saved at {filename}")
      return True

    finally:
      image.Release()

  except camera.sdk.SpinnakerException as e:
    camera.log(logging.ERROR, f"Error: {e}")
    return False


def acquire_images(cameras:List[Camera], config:ExampleConfig, saver:ImageSaver, logger:Logger) -> bool:
  logger.info("*** IMAGE ACQUISITION ***")
  settings = config.acquisition

  result = True
  try:
    for camera in cameras:
      if not start_camera(camera, config):
        return False

    with ExitStack() as stack:
      for camera in cameras:
        stack.enter_context(camera.acquisition())
        camera.log(logging.INFO, "Started acquiring images...")

      for i in range(settings.num_images):
        for camera in cameras:
          result &= grab_one(camera, saver, i, settings.timeout_ms)

  finally:
    for camera in cameras:
      result &= common.restore_stream(camera, settings)

  return result


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  if not common.check_write_access(config.acquisition.output_dir, logger):
    return False

  common.log_library_version(system, logger)
  saver = ImageSaver.from_settings(system.sdk, config.acquisition)

  with system.camera_list() as cameras:
    if not common.enough_cameras(cameras, logger):
      return False

    result = True
    for camera in cameras:
      logger.info(f"Printing device information for camera {camera.index}...")
      result &= camera.log_device_info()

    try:
      with common.all_initialized(cameras):
        result &= acquire_images(cameras, config, saver, logger)

    except (RuntimeError, system.sdk.SpinnakerException) as e:
      logger.error(f"Error: {e}")
      result = False

  return result
