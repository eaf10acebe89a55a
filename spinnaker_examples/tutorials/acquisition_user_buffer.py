""" Acquisition into buffers allocated by the user instead of the library.

Each buffer holds one image payload, rounded up to whole 1024 byte packets on
USB3 cameras. The memory is handed over either as one contiguous block or as
one array per buffer, the library derives its buffer count from the total.
The arrays must stay alive until acquisition has ended.
"""
from functools import partial
from logging import Logger
import logging

from beartype.typing import List
import numpy as np

from spinnaker_examples.config import AcquisitionSettings, ExampleConfig, UserBufferSettings
from spinnaker_examples.driver import Camera, SpinSystem
from spinnaker_examples.image import ImageSaver

from . import common


usb_packet_size = 1024


def buffer_size(payload_size:int, device_type:str) -> int:
  if device_type == "USB3Vision":
    return ((payload_size + usb_packet_size - 1) // usb_packet_size) * usb_packet_size
  return payload_size


def allocate_buffers(num_buffers:int, size:int, contiguous:bool) -> List[np.ndarray]:
  if contiguous:
    return [np.zeros(num_buffers * size, dtype=np.uint8)]
  return [np.zeros(size, dtype=np.uint8) for _ in range(num_buffers)]


@common.step
def configure_user_buffers(camera:Camera, settings:UserBufferSettings, buffers:List[np.ndarray]):
  camera.logger.info("*** CONFIGURING USER BUFFERS ***")
  sdk = camera.sdk

  camera.stream_nodemap.set_value("StreamBufferCountMode", "Manual")
  camera.log(logging.INFO, "Stream buffer count mode set to manual...")

  size = buffer_size(camera.nodemap.get_value("PayloadSize"),
    str(camera.tl_device_nodemap.try_get_value("DeviceType", "")))

  # Without user ownership BeginAcquisition allocates its own buffers
  if camera.camera.GetBufferOwnership() != sdk.SPINNAKER_BUFFER_OWNERSHIP_USER:
    camera.camera.SetBufferOwnership(sdk.SPINNAKER_BUFFER_OWNERSHIP_USER)

  buffers.extend(allocate_buffers(settings.num_buffers, size, settings.contiguous))

  if settings.contiguous:
    memory = buffers[0]
    camera.camera.SetUserBuffers(memory, memory.nbytes)
    camera.log(logging.INFO, f"User-allocated memory of {memory.nbytes} bytes will be used for user buffers...")
  else:
    camera.camera.SetUserBuffers(buffers, len(buffers), size)
    camera.log(logging.INFO, f"{len(buffers)} user-allocated buffers of {size} bytes will be used for user buffers...")


@common.step
def acquire_images(camera:Camera, saver:ImageSaver, settings:AcquisitionSettings):
  camera.logger.info("*** IMAGE ACQUISITION ***")
  camera.set_acquisition_mode("Continuous")

  with camera.acquisition():
    count = camera.stream_nodemap.try_get_value("StreamBufferCountResult")
    camera.log(logging.INFO, f"Resulting stream buffer count: {count}.")

    camera.log(logging.INFO, "Acquiring images...")
    return common.save_images(camera, saver, "AcquisitionUserBuffer",
      settings.num_images, settings.timeout_ms)


@common.step
def release_user_buffers(camera:Camera, buffers:List[np.ndarray]):
  camera.camera.SetBufferOwnership(camera.sdk.SPINNAKER_BUFFER_OWNERSHIP_SYSTEM)
  if len(buffers) > 0:
    buffers.clear()
    camera.log(logging.INFO, "Cleaned up user-allocated memory used for user buffers...")


def run_single_camera(camera:Camera, config:ExampleConfig, saver:ImageSaver) -> bool:
  settings = config.acquisition
  result = camera.log_device_info()
  buffers = []

  with camera.initialized():
    try:
      if not common.prepare_stream(camera, settings):
        return False

      if not configure_user_buffers(camera, config.user_buffer, buffers):
        return False

      result &= acquire_images(camera, saver, settings)
    finally:
      result &= release_user_buffers(camera, buffers)
      result &= common.restore_stream(camera, settings)

  return result


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  saver = ImageSaver.from_settings(system.sdk, config.acquisition)
  return common.run_each_camera(system, logger,
    partial(run_single_camera, config=config, saver=saver),
    output_dir=config.acquisition.output_dir)
