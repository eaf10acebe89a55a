from contextlib import contextmanager
from logging import Logger
from beartype.typing import Iterator, List

from .camera import Camera
from .helpers import NodeMap
from .interface import LibraryVersion


class SpinSystem():
  """ Owns the SDK system singleton.

  Camera and interface lists are handed out through context managers which
  drop every reference and clear the list on exit, the system instance can
  only be released once nothing refers to a camera any more.
  """

  def __init__(self, sdk, logger:Logger):
    self.sdk = sdk
    self.logger = logger
    self.system = sdk.System.GetInstance()

  @property
  def library_version(self) -> LibraryVersion:
    version = self.system.GetLibraryVersion()
    return LibraryVersion(version.major, version.minor, version.type, version.build)

  @property
  def tl_nodemap(self) -> NodeMap:
    return NodeMap(self.sdk, self.system.GetTLNodeMap())

  def gev_enumeration_enabled(self) -> bool:
    nodemap = self.tl_nodemap
    if not nodemap.is_readable("EnumerateGEVInterfaces"):
      self.logger.warning("EnumerateGEVInterfaces node is unavailable")
      return False

    enabled = bool(nodemap.get_value("EnumerateGEVInterfaces"))
    if not enabled:
      self.logger.warning("GEV Enumeration is disabled. If you intend to use GigE cameras "
        "set EnumerateGEVInterfaces to true and relaunch your application.")
    else:
      self.logger.info("EnumerateGEVInterfaces is enabled. Continuing..")
    return enabled

  def camera_count(self) -> int:
    camera_list = self.system.GetCameras()
    count = camera_list.GetSize()
    camera_list.Clear()
    return count

  @contextmanager
  def camera_list(self) -> Iterator[List[Camera]]:
    camera_list = self.system.GetCameras()
    cameras = [Camera(self.sdk, camera_list.GetByIndex(i), self.logger, index=i)
               for i in range(camera_list.GetSize())]
    try:
      yield cameras
    finally:
      for camera in cameras:
        camera.release()
      cameras.clear()
      camera_list.Clear()

  @contextmanager
  def interface_list(self, update:bool=True):
    interface_list = self.system.GetInterfaces(update)
    interfaces = [interface_list.GetByIndex(i) for i in range(interface_list.GetSize())]
    try:
      yield interfaces
    finally:
      interfaces.clear()
      interface_list.Clear()

  def update_interfaces(self):
    self.system.UpdateInterfaceList()

  def register_event_handler(self, handler):
    self.system.RegisterEventHandler(handler)

  def unregister_event_handler(self, handler):
    self.system.UnregisterEventHandler(handler)

  def register_interface_event_handler(self, handler):
    self.system.RegisterInterfaceEventHandler(handler)

  def unregister_interface_event_handler(self, handler):
    self.system.UnregisterInterfaceEventHandler(handler)

  def register_logging_event_handler(self, handler, level:str="debug"):
    """ Forward SDK log events at `level` (debug, info, notice, warn, error, crit, alert, fatal, off) or above."""
    self.system.RegisterLoggingEventHandler(handler)
    self.system.SetLoggingEventPriorityLevel(getattr(self.sdk, f"SPINNAKER_LOG_LEVEL_{level.upper()}"))

  def unregister_logging_event_handler(self, handler):
    self.system.UnregisterLoggingEventHandler(handler)

  def release(self):
    if self.system is not None:
      self.logger.info("Releasing Spinnaker instance...")
      self.system.ReleaseInstance()
      self.system = None
      self.logger.info("Done.")

  def __enter__(self):
    return self

  def __exit__(self, exc_type, exc_value, traceback):
    self.release()
