""" Walk the TL device, TL stream and GenICam node maps from their Root category and print every readable node.

Values are either read generically as strings, or individually according to
each node's interface type. Long strings and tooltips are truncated.
"""
from functools import partial
from logging import Logger

from beartype.typing import List

from spinnaker_examples.config import ExampleConfig, NodeMapInfoSettings, ReadType
from spinnaker_examples.driver import Camera, NodeMap, SpinSystem

from . import common


def truncate(value:str, max_chars:int) -> str:
  return value[:max_chars] + "..." if len(value) > max_chars else value


def indent(level:int) -> str:
  return "   " * level


def read_individual(nodemap:NodeMap, node, max_chars:int):
  """ Value of a node read through its own interface type, None for unsupported types."""
  sdk = nodemap.sdk
  t = nodemap.interface_type(node)
  typed = nodemap.typed(node) if t in nodemap.node_types else None

  if t == sdk.intfIString:
    return truncate(typed.GetValue(), max_chars)
  elif t in (sdk.intfIInteger, sdk.intfIFloat):
    return typed.GetValue()
  elif t == sdk.intfIBoolean:
    return "true" if typed.GetValue() else "false"
  elif t == sdk.intfICommand:
    return truncate(typed.GetToolTip(), max_chars)
  elif t == sdk.intfIEnumeration:
    return typed.GetCurrentEntry().GetSymbolic()
  return None


def category_lines(nodemap:NodeMap, category, settings:NodeMapInfoSettings, level:int=0) -> List[str]:
  """ Lines describing a category and, recursively, every readable feature below it."""
  sdk = nodemap.sdk
  lines = [f"{indent(level)}{category.GetDisplayName()}"]

  for feature in sdk.CCategoryPtr(category).GetFeatures():
    if not sdk.IsAvailable(feature) or not sdk.IsReadable(feature):
      continue

    if nodemap.interface_type(feature) == sdk.intfICategory:
      lines.extend(category_lines(nodemap, feature, settings, level + 1))
      continue

    if settings.read_type == ReadType.value:
      value = truncate(nodemap.to_string(feature), settings.max_chars)
    else:
      value = read_individual(nodemap, feature, settings.max_chars)
      if value is None:
        continue

    lines.append(f"{indent(level + 1)}{feature.GetDisplayName()}: {value}")

  return lines


def print_nodemap(nodemap:NodeMap, settings:NodeMapInfoSettings, logger:Logger):
  for line in category_lines(nodemap, nodemap.raw("Root"), settings):
    logger.info(line)


@common.step
def print_all_nodemaps(camera:Camera, settings:NodeMapInfoSettings):
  camera.logger.info("*** PRINTING TL DEVICE NODEMAP ***")
  print_nodemap(camera.tl_device_nodemap, settings, camera.logger)

  camera.logger.info("*** PRINTING TL STREAM NODEMAP ***")
  print_nodemap(camera.stream_nodemap, settings, camera.logger)

  # The GenICam node map is only available while the camera is initialized
  camera.logger.info("*** PRINTING GENICAM NODEMAP ***")
  with camera.initialized():
    print_nodemap(camera.nodemap, settings, camera.logger)


def run_single_camera(camera:Camera, config:ExampleConfig) -> bool:
  return print_all_nodemaps(camera, config.node_map_info)


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  return common.run_each_camera(system, logger, partial(run_single_camera, config=config))
