""" Chunk data: per-image metadata (exposure, gain, frame ID, timestamp...) attached to the payload.

Chunk data is only valid for the image it arrived with. It can be read either
from the image object or from the ChunkDataControl category of the node map,
which reflects the most recently grabbed image.
"""
from functools import partial
from logging import Logger
import logging

from beartype.typing import Dict, List, Tuple

from spinnaker_examples.config import ChunkDataSource, ExampleConfig
from spinnaker_examples.driver import Camera, NodeException, NodeMap, SpinSystem
from spinnaker_examples.image import ImageSaver

from . import common


chunk_fields = [
  ("Exposure time", "GetExposureTime"),
  ("Frame ID", "GetFrameID"),
  ("Gain", "GetGain"),
  ("Height", "GetHeight"),
  ("Offset X", "GetOffsetX"),
  ("Offset Y", "GetOffsetY"),
  ("Sequencer set active", "GetSequencerSetActive"),
  ("Timestamp", "GetTimestamp"),
  ("Width", "GetWidth"),
]


def set_chunk_entries(nodemap:NodeMap, enable:bool) -> Dict[str, str]:
  """ Enable or disable chunk data for every selectable entry, returns the outcome per entry."""
  status = {}
  wanted = "enabled" if enable else "disabled"

  for entry in nodemap.entries("ChunkSelector"):
    nodemap.set_value("ChunkSelector", entry)

    if not nodemap.is_readable("ChunkEnable"):
      status[entry] = "not available"
    elif bool(nodemap.get_value("ChunkEnable")) == enable:
      status[entry] = wanted
    elif nodemap.is_writable("ChunkEnable"):
      nodemap.set_value("ChunkEnable", enable)
      status[entry] = wanted
    else:
      status[entry] = "not writable"

  return status


@common.step
def configure_chunk_data(camera:Camera):
  camera.logger.info("*** CONFIGURING CHUNK DATA ***")
  nodemap = camera.nodemap

  # Once active, chunk data is added to the payload of every image
  nodemap.set_value("ChunkModeActive", True)
  camera.log(logging.INFO, "Chunk mode activated...")

  camera.logger.info("Enabling entries...")
  for entry, status in set_chunk_entries(nodemap, True).items():
    camera.logger.info(f"\t{entry}: {status}")


@common.step
def disable_chunk_data(camera:Camera):
  nodemap = camera.nodemap

  camera.logger.info("Disabling entries...")
  for entry, status in set_chunk_entries(nodemap, False).items():
    camera.logger.info(f"\t{entry}: {status}")

  nodemap.set_value("ChunkModeActive", False)
  camera.log(logging.INFO, "Chunk mode deactivated...")


def image_chunk_data(image) -> List[Tuple[str, object]]:
  chunk_data = image.GetChunkData()
  return [(name, getattr(chunk_data, getter)()) for name, getter in chunk_fields]


def nodemap_chunk_data(nodemap:NodeMap) -> List[Tuple[str, str]]:
  sdk = nodemap.sdk
  values = []

  for feature in nodemap.features("ChunkDataControl"):
    if not sdk.IsReadable(feature):
      values.append(("Node", "not available"))
    elif nodemap.interface_type(feature) == sdk.intfIBoolean:
      values.append((feature.GetDisplayName(), "true" if sdk.CBooleanPtr(feature).GetValue() else "false"))
    else:
      values.append((feature.GetDisplayName(), nodemap.to_string(feature)))
  return values


def display_chunk_data(camera:Camera, source:ChunkDataSource, image) -> bool:
  try:
    if source == ChunkDataSource.image:
      camera.logger.info("Printing chunk data from image...")
      values = image_chunk_data(image)
    else:
      camera.logger.info("Printing chunk data from nodemap...")
      values = nodemap_chunk_data(camera.nodemap)

    for name, value in values:
      camera.logger.info(f"\t{name}: {value}")
    return True

  except NodeException as e:
    camera.log(logging.ERROR, f"Chunk data not available: {e}")
    return False


def run_single_camera(camera:Camera, config:ExampleConfig, saver:ImageSaver) -> bool:
  settings = config.acquisition
  result = camera.log_device_info()

  with camera.initialized():
    if not configure_chunk_data(camera):
      return False

    show = lambda i, image: display_chunk_data(camera, config.chunk_data.source, image)
    result &= common.acquire_images(camera, saver, "ChunkData",
      settings.num_images, settings.timeout_ms, on_image=show)

    result &= disable_chunk_data(camera)

  return result


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  saver = ImageSaver.from_settings(system.sdk, config.acquisition)
  return common.run_each_camera(system, logger,
    partial(run_single_camera, config=config, saver=saver),
    output_dir=config.acquisition.output_dir)
