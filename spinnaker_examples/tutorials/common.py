from contextlib import contextmanager, ExitStack
from functools import wraps
from logging import Logger
import logging
from pathlib import Path
import tempfile
from beartype.typing import Callable, List, Optional

from spinnaker_examples.config import AcquisitionSettings
from spinnaker_examples.driver import Camera, SpinSystem, NodeException
from spinnaker_examples.image import ImageSaver


RunCamera = Callable[[Camera], bool]


def step(func):
  """ Run one configuration or acquisition step, turning node and SDK errors into failure.

  The first argument must carry `sdk` and `logger` (a Camera or SpinSystem).
  Steps returning None count as success.
  """
  @wraps(func)
  def f(target, *args, **kwargs):
    try:
      result = func(target, *args, **kwargs)
      return True if result is None else bool(result)
    except (NodeException, target.sdk.SpinnakerException) as e:
      target.logger.error(f"{func.__name__}: {e}")
      return False
  return f


def check_write_access(output_dir:str, logger:Logger) -> bool:
  try:
    Path(output_dir).mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(dir=output_dir):
      pass
    return True
  except OSError as e:
    logger.error(f"Unable to write to {output_dir}, please check permissions: {e}")
    return False


def log_library_version(system:SpinSystem, logger:Logger):
  logger.info(f"Spinnaker library version: {system.library_version}")


def enough_cameras(cameras:List[Camera], logger:Logger) -> bool:
  logger.info(f"Number of cameras detected: {len(cameras)}")
  if len(cameras) == 0:
    logger.error("Not enough cameras!")
    return False
  return True


@contextmanager
def all_initialized(cameras:List[Camera]):
  """ Initialize every camera, de-initializing them all on exit."""
  with ExitStack() as stack:
    for camera in cameras:
      stack.enter_context(camera.initialized())
    yield cameras


def run_each_camera(system:SpinSystem, logger:Logger, run_camera:RunCamera,
                    output_dir:Optional[str]=None) -> bool:
  """ Runs `run_camera` for each detected camera in turn, failing when there are none."""
  if output_dir is not None and not check_write_access(output_dir, logger):
    return False

  log_library_version(system, logger)

  with system.camera_list() as cameras:
    if not enough_cameras(cameras, logger):
      return False

    result = True
    for camera in cameras:
      logger.info(f"Running example for camera {camera.index}...")
      try:
        result &= run_camera(camera)
      except (NodeException, system.sdk.SpinnakerException) as e:
        camera.log(logging.ERROR, f"Error: {e}")
        result = False

      logger.info(f"Camera {camera.index} example complete...")

  return result


@step
def configure_heartbeat(camera:Camera, enable:bool):
  return camera.configure_heartbeat(enable)


@step
def set_stream_mode(camera:Camera, settings:AcquisitionSettings):
  return camera.set_stream_mode(settings.stream_mode.name)


def prepare_stream(camera:Camera, settings:AcquisitionSettings) -> bool:
  result = configure_heartbeat(camera, not settings.disable_heartbeat)
  return set_stream_mode(camera, settings) and result


def restore_stream(camera:Camera, settings:AcquisitionSettings) -> bool:
  if settings.disable_heartbeat:
    return configure_heartbeat(camera, True)
  return True


def save_images(camera:Camera, saver:ImageSaver, prefix:str, num_images:int, timeout_ms:int,
                on_image:Optional[Callable[[int, object], bool]]=None,
                before_grab:Optional[Callable[[int], None]]=None) -> bool:
  """ Grab and save images from a camera which is already acquiring."""
  result = True
  serial = camera.serial

  for i, image in camera.grab_images(num_images, timeout_ms, before_grab=before_grab):
    try:
      camera.log(logging.INFO, f"Grabbed image {i}, width = {image.GetWidth()}, height = {image.GetHeight()}")
      filename = saver.save(image, prefix, i, serial)
      camera.log(logging.INFO, f"Image saved at {filename}")

      if on_image is not None:
        result &= on_image(i, image)

    except camera.sdk.SpinnakerException as e:
      camera.log(logging.ERROR, f"Error: {e}")
      result = False

  return result and camera.errors == 0


@step
def acquire_images(camera:Camera, saver:ImageSaver, prefix:str, num_images:int, timeout_ms:int,
                   on_image:Optional[Callable[[int, object], bool]]=None,
                   before_grab:Optional[Callable[[int], None]]=None):
  camera.logger.info("*** IMAGE ACQUISITION ***")
  camera.set_acquisition_mode("Continuous")

  with camera.acquisition():
    camera.log(logging.INFO, "Acquiring images...")
    return save_images(camera, saver, prefix, num_images, timeout_ms, on_image=on_image, before_grab=before_grab)


@step
def set_acquisition_mode(camera:Camera, mode:str="Continuous"):
  camera.set_acquisition_mode(mode)
