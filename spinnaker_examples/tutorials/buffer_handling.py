""" How the stream buffer handling modes decide which frames are returned.

The camera is software triggered a fixed number of times into a small manual
buffer pool, then images are retrieved until the library runs out. Which
frame IDs come back, and when retrieval fails, depends on the mode.
"""
from functools import partial
from logging import Logger
import logging
import time

from spinnaker_examples.config import BufferHandlingMode, BufferHandlingSettings, ExampleConfig, TriggerSettings
from spinnaker_examples.driver import Camera, SpinSystem
from spinnaker_examples.image import ImageSaver

from . import common, trigger


def expected_image_count(mode:BufferHandlingMode, num_buffers:int, gige_trash_buffer:bool=False) -> int:
  """ Number of images retrievable after triggering more often than there are buffers."""
  if mode == BufferHandlingMode.NewestOnly:
    return 1
  elif mode == BufferHandlingMode.OldestFirstOverwrite:
    return num_buffers - 1

  # TeledyneGigeVision streaming reserves one buffer for trashing frames
  return num_buffers - 1 if gige_trash_buffer else num_buffers


def has_trash_buffer(camera:Camera) -> bool:
  device_type = camera.tl_device_nodemap.try_get_value("DeviceType")
  return (device_type == "GigEVision"
    and camera.stream_nodemap.try_get_value("StreamMode") == "TeledyneGigeVision")


@common.step
def configure_buffers(camera:Camera, settings:BufferHandlingSettings):
  stream = camera.stream_nodemap

  stream.set_value("StreamBufferCountMode", "Manual")
  camera.log(logging.INFO, "Stream Buffer Count Mode set to manual...")

  camera.logger.info(f"Default Buffer Count: {stream.get_value('StreamBufferCountManual')}")
  camera.logger.info(f"Maximum Buffer Count: {stream.value_range('StreamBufferCountManual')[1]}")

  stream.set_value("StreamBufferCountManual", settings.num_buffers)
  camera.logger.info(f"Buffer count now set to: {stream.get_value('StreamBufferCountManual')}")

  camera.logger.info(f"Camera will be triggered {settings.num_triggers} times in a row "
    f"before {settings.num_loops} images will be retrieved")
  camera.logger.info("Note - Buffer behaviour is different for USB3 and GigE cameras, "
    "USB3 cameras buffer images internally if no host buffers are available, GigE cameras do not.")


def retrieve_images(camera:Camera, saver:ImageSaver, mode:BufferHandlingMode, settings:BufferHandlingSettings):
  """ Grab until the library has no more image data, returns the frame IDs retrieved."""
  serial = camera.serial
  frame_ids = []

  for i in range(1, settings.num_loops + 1):
    try:
      image = camera.next_image(settings.timeout_ms)
    except camera.sdk.SpinnakerException as e:
      camera.log(logging.INFO, f"No image data for image #{i}: {e}")
      break

    try:
      if image.IsIncomplete():
        camera.log(logging.WARNING, f"Image incomplete with image status {image.GetImageStatus()}...")
        continue

      filename = saver.save(image, mode.name, i, serial)
      frame_ids.append(image.GetFrameID())
      camera.log(logging.INFO, f"GetNextImage() #{i}, Frame ID: {image.GetFrameID()}, Image saved at {filename}")
    finally:
      image.Release()

  return frame_ids


@common.step
def run_mode(camera:Camera, saver:ImageSaver, mode:BufferHandlingMode, settings:BufferHandlingSettings,
             trigger_settings:TriggerSettings, settle:bool=False):
  camera.stream_nodemap.set_value("StreamBufferHandlingMode", mode.name)
  camera.logger.info(f"*** Buffer handling mode has been set to {mode.name} ***")

  with camera.acquisition():
    if settle:
      time.sleep(settings.settle_sec)

    for _ in range(settings.num_triggers):
      trigger.fire_trigger(camera, trigger_settings)
      time.sleep(settings.loop_interval_sec)

    camera.logger.info(f"Camera triggered {settings.num_triggers} times")
    camera.logger.info("Retrieving images from library until no image data is returned")

    frame_ids = retrieve_images(camera, saver, mode, settings)

  expected = expected_image_count(mode, settings.num_buffers, has_trash_buffer(camera))
  camera.log(logging.INFO, f"Retrieved {len(frame_ids)} images {frame_ids}, "
    f"expected {min(expected, settings.num_triggers, settings.num_loops)} in {mode.name} mode")


def run_single_camera(camera:Camera, config:ExampleConfig, saver:ImageSaver) -> bool:
  settings = config.buffer_handling
  trigger_settings = TriggerSettings()

  result = camera.log_device_info()

  with camera.initialized():
    if not (trigger.configure_trigger(camera, trigger_settings)
        and common.set_acquisition_mode(camera, "Continuous")
        and configure_buffers(camera, settings)):
      return False

    for i, mode in enumerate(settings.modes):
      result &= run_mode(camera, saver, mode, settings, trigger_settings, settle=(i == 0))

    result &= trigger.reset_trigger(camera)

  return result


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  saver = ImageSaver.from_settings(system.sdk, config.acquisition)
  return common.run_each_camera(system, logger,
    partial(run_single_camera, config=config, saver=saver),
    output_dir=config.acquisition.output_dir)
