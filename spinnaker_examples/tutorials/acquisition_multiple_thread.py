""" Acquire from every camera concurrently, one worker thread per camera.

Each worker owns its camera from Init to DeInit. Failed grabs are reported
per camera and the overall result is only successful if every worker was.
"""
from logging import Logger
import logging
import threading

from beartype.typing import Dict

from spinnaker_examples.concurrent import WorkQueue
from spinnaker_examples.config import ExampleConfig
from spinnaker_examples.driver import Camera, SpinSystem
from spinnaker_examples.image import ImageSaver

from . import common


class CameraWorker():
  def __init__(self, config:ExampleConfig, saver:ImageSaver):
    self.config = config
    self.saver = saver

    self.lock = threading.Lock()
    self.results: Dict[int, bool] = {}

  def __call__(self, camera:Camera):
    settings = self.config.acquisition
    camera.log(logging.INFO, "Starting grab thread")

    result = camera.log_device_info()
    with camera.initialized():
      try:
        if common.prepare_stream(camera, settings):
          result &= common.acquire_images(camera, self.saver, "AcquisitionMultipleThread",
            settings.num_images, settings.timeout_ms)
        else:
          result = False
      finally:
        result &= common.restore_stream(camera, settings)

    camera.log(logging.INFO, "End grab")
    with self.lock:
      self.results[camera.index] = result


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  if not common.check_write_access(config.acquisition.output_dir, logger):
    return False

  common.log_library_version(system, logger)
  saver = ImageSaver.from_settings(system.sdk, config.acquisition)

  with system.camera_list() as cameras:
    if not common.enough_cameras(cameras, logger):
      return False

    worker = CameraWorker(config, saver)
    queue = WorkQueue("grab", worker, logger, num_workers=len(cameras))

    logger.info("Starting grab threads")
    with queue:
      for camera in cameras:
        queue.enqueue(camera)
      logger.info("Waiting for grab threads")

    ok = (queue.failures == 0 and len(worker.results) == len(cameras)
          and all(worker.results.values()))

    if not ok:
      logger.error("There are errors found with the grab threads, please check the log for details.")

  return ok
