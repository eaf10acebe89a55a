""" Image events: images are delivered to a handler on an SDK thread instead of being grabbed.

The main thread only waits until the handler has saved enough images.
"""
from functools import partial
from logging import Logger
import logging
import threading
import time

from spinnaker_examples.config import ExampleConfig, ImageEventSettings
from spinnaker_examples.driver import Camera, SpinSystem, events
from spinnaker_examples.image import ImageSaver

from . import common


class ImageRecorder():
  """ Saves the first `num_images` complete images received, then signals `done`."""

  def __init__(self, camera:Camera, saver:ImageSaver, num_images:int):
    self.camera = camera
    self.saver = saver
    self.num_images = num_images
    self.serial = camera.serial

    self.count = 0
    self.errors = 0
    self.lock = threading.Lock()
    self.done = threading.Event()

  def on_image(self, image):
    """ Images belong to the stream's buffer pool, every one delivered is released."""
    try:
      with self.lock:
        if self.count >= self.num_images:
          return

        self.camera.log(logging.INFO, "Image event occurred...")
        if image.IsIncomplete():
          self.camera.log(logging.WARNING, f"Image incomplete with image status {image.GetImageStatus()}...")
          return

        try:
          self.camera.log(logging.INFO,
            f"Grabbed image {self.count}, width = {image.GetWidth()}, height = {image.GetHeight()}")
          filename = self.saver.save(image, "ImageEvents", self.count, self.serial)
          self.camera.log(logging.INFO, f"Image saved at {filename}")
        except self.camera.sdk.SpinnakerException as e:
          self.camera.log(logging.ERROR, f"Error: {e}")
          self.errors += 1

        self.count += 1
        if self.count >= self.num_images:
          self.done.set()
    finally:
      image.Release()


def wait_for_images(recorder:ImageRecorder, settings:ImageEventSettings, logger:Logger) -> bool:
  deadline = time.monotonic() + settings.timeout_sec

  while not recorder.done.wait(settings.wait_interval_sec):
    logger.info(f"\tSleeping for {settings.wait_interval_sec} seconds, grabbing images...")
    if time.monotonic() > deadline:
      logger.error(f"Timed out waiting for images, {recorder.count} of {recorder.num_images} received")
      return False

  return True


def run_single_camera(camera:Camera, config:ExampleConfig, saver:ImageSaver, logger:Logger) -> bool:
  result = camera.log_device_info()

  recorder = ImageRecorder(camera, saver, config.acquisition.num_images)
  bridge = events.EventBridge()
  bridge.bind(on_image=recorder.on_image)

  with camera.initialized():
    logger.info("*** CONFIGURING IMAGE EVENTS ***")
    handler = events.image_event_handler(camera.sdk, bridge)
    camera.register_event_handler(handler)

    try:
      if not common.set_acquisition_mode(camera, "Continuous"):
        return False

      with camera.acquisition():
        camera.log(logging.INFO, "Acquiring images...")
        result &= wait_for_images(recorder, config.image_events, logger)

    finally:
      camera.unregister_event_handler(handler)
      logger.info("Image events unregistered...")

  return result and recorder.errors == 0


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  saver = ImageSaver.from_settings(system.sdk, config.acquisition)
  return common.run_each_camera(system, logger,
    partial(run_single_camera, config=config, saver=saver, logger=logger),
    output_dir=config.acquisition.output_dir)
