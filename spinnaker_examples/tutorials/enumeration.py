""" List the interfaces known to the system and the cameras on each of them."""
from logging import Logger

from beartype.typing import List

from spinnaker_examples.config import ExampleConfig
from spinnaker_examples.driver import Camera, CameraInfo, NodeMap, SpinSystem

from . import common


def query_interface(system:SpinSystem, interface, logger:Logger) -> List[CameraInfo]:
  nodemap = NodeMap(system.sdk, interface.GetTLNodeMap())
  display_name = nodemap.try_get_value("InterfaceDisplayName")

  logger.info(display_name if display_name is not None else "Interface display name not readable")

  interface.UpdateCameras()
  camera_list = interface.GetCameras()
  cameras = [Camera(system.sdk, camera_list.GetByIndex(i), logger, index=i)
             for i in range(camera_list.GetSize())]

  try:
    if len(cameras) == 0:
      logger.info("\tNo devices detected.")

    infos = [camera.camera_info() for camera in cameras]
    for info in infos:
      logger.info(f"\tDevice {info.serial} {info.vendor} {info.model}")
    return infos

  finally:
    for camera in cameras:
      camera.release()
    camera_list.Clear()


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  common.log_library_version(system, logger)
  result = True

  with system.interface_list() as interfaces:
    logger.info(f"Number of interfaces detected: {len(interfaces)}")

    num_cameras = system.camera_count()
    logger.info(f"Number of cameras detected: {num_cameras}")

    if num_cameras == 0 or len(interfaces) == 0:
      logger.error("Not enough cameras!")
      return False

    logger.info("*** QUERYING INTERFACES ***")
    for interface in interfaces:
      try:
        query_interface(system, interface, logger)
      except system.sdk.SpinnakerException as e:
        logger.error(f"Error: {e}")
        result = False

  return result
