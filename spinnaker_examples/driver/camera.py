from contextlib import contextmanager
from logging import Logger
import logging
from beartype.typing import Callable, Iterator, Optional, Tuple

from beartype import beartype

from .helpers import NodeMap, NodeException
from .interface import CameraInfo


stream_modes = {
  "TeledyneGigeVision": "TeledyneGigeVision",
  "LWF": "LWF",
  "Socket": "Socket",
}


class Camera():

  def __init__(self, sdk, camera, logger:Logger, index:int=0):
    self.sdk = sdk
    self.camera = camera
    self.logger = logger
    self.index = index

  @property
  def name(self) -> str:
    serial = self.serial
    return f"camera {self.index}" if serial == "" else f"camera {self.index} ({serial})"

  def log(self, level:int, message:str):
    self.logger.log(level, f"{self.name}:{message}")

  @property
  def tl_device_nodemap(self) -> NodeMap:
    return NodeMap(self.sdk, self.camera.GetTLDeviceNodeMap())

  @property
  def nodemap(self) -> NodeMap:
    return NodeMap(self.sdk, self.camera.GetNodeMap())

  @property
  def stream_nodemap(self) -> NodeMap:
    return NodeMap(self.sdk, self.camera.GetTLStreamNodeMap())

  @property
  def serial(self) -> str:
    return str(self.tl_device_nodemap.try_get_value("DeviceSerialNumber", ""))

  def camera_info(self) -> CameraInfo:
    nodemap = self.tl_device_nodemap
    return CameraInfo(
      serial=self.serial,
      vendor=str(nodemap.try_get_value("DeviceVendorName", "")),
      model=str(nodemap.try_get_value("DeviceModelName", ""))
    )

  def __repr__(self):
    return f"spinnaker.Camera({self.index}:{self.serial})"

  def log_device_info(self) -> bool:
    self.logger.info("*** DEVICE INFORMATION ***")
    try:
      for name, value in self.tl_device_nodemap.device_information():
        self.logger.info(f"{name}: {value}")
      return True

    except NodeException as e:
      self.logger.warning(str(e))
      return False

  @property
  def is_initialized(self) -> bool:
    return self.camera.IsValid() and self.camera.IsInitialized()

  @property
  def is_streaming(self) -> bool:
    return self.is_initialized and self.camera.IsStreaming()

  def init(self):
    self.camera.Init()
    if not self.is_initialized:
      raise RuntimeError(f"Failed to initialize {self.name}")

  def deinit(self):
    if self.camera.IsInitialized():
      self.camera.DeInit()

  @contextmanager
  def initialized(self):
    self.init()
    try:
      yield self
    finally:
      self.deinit()

  @beartype
  def set_stream_mode(self, mode:str) -> bool:
    """ Select the host side streaming driver; cameras without the node are left unchanged."""
    nodemap = self.stream_nodemap
    if not nodemap.is_readable("StreamMode") or not nodemap.is_writable("StreamMode"):
      return True

    if mode not in stream_modes:
      raise ValueError(f"Unknown stream mode {mode}, options are {list(stream_modes.keys())}")

    try:
      nodemap.set_value("StreamMode", stream_modes[mode])
    except NodeException as e:
      self.log(logging.ERROR, f"Custom stream mode is not available: {e}")
      return False

    self.log(logging.INFO, f"Stream Mode set to {nodemap.get_value('StreamMode')}...")
    return True

  def configure_heartbeat(self, enable:bool) -> bool:
    """ Enable or disable the GigE Vision control channel heartbeat.

    Disabling keeps a camera alive while stepping through code in a debugger;
    it has to be re-enabled before the camera is released, or the camera may
    need a power cycle.
    """
    tl_device = self.tl_device_nodemap

    if not tl_device.is_readable("DeviceType"):
      self.log(logging.ERROR, "Unable to access TL device nodemap. Aborting...")
      return False

    if tl_device.get_value("DeviceType") != "GigEVision":
      return True

    self.log(logging.INFO, "Resetting heartbeat" if enable else "Disabling heartbeat")

    nodemap = self.nodemap
    if not nodemap.is_writable("GevGVCPHeartbeatDisable"):
      self.log(logging.WARNING,
        "Unable to disable heartbeat on camera. Continuing with execution as this may be non-fatal...")
      return True

    nodemap.set_value("GevGVCPHeartbeatDisable", not enable)
    if enable:
      self.log(logging.INFO, "Heartbeat has been reset.")
    else:
      self.log(logging.WARNING, "Heartbeat has been disabled for the rest of this run, "
        "if aborted before it is reset the camera may need to be power cycled.")
    return True

  def set_acquisition_mode(self, mode:str="Continuous"):
    self.nodemap.set_value("AcquisitionMode", mode)
    self.log(logging.INFO, f"Acquisition mode set to {mode.lower()}...")

  @contextmanager
  def acquisition(self):
    self.camera.BeginAcquisition()
    try:
      yield self
    finally:
      self.camera.EndAcquisition()

  def next_image(self, timeout_ms:Optional[int]=None):
    if timeout_ms is None:
      return self.camera.GetNextImage()
    return self.camera.GetNextImage(int(timeout_ms))

  def grab_images(self, count:int, timeout_ms:int,
                  before_grab:Optional[Callable[[int], None]]=None) -> Iterator[Tuple[int, object]]:
    """ Yields (index, image) for each complete image, releasing it afterwards.

    `before_grab(i)` runs ahead of each grab (e.g. to fire a software trigger).
    Errors for a single image are logged and recorded in `self.errors`,
    incomplete images are skipped.
    """
    self.errors = 0
    for i in range(count):
      try:
        if before_grab is not None:
          before_grab(i)
        image = self.next_image(timeout_ms)
        try:
          if image.IsIncomplete():
            self.log(logging.WARNING, f"Image incomplete with image status {image.GetImageStatus()}...")
          else:
            yield i, image
        finally:
          image.Release()

      except self.sdk.SpinnakerException as e:
        self.log(logging.ERROR, f"Error: {e}")
        self.errors += 1

  def register_event_handler(self, handler, event_name:Optional[str]=None):
    if event_name is None:
      self.camera.RegisterEventHandler(handler)
    else:
      self.camera.RegisterEventHandler(handler, event_name)

  def unregister_event_handler(self, handler):
    self.camera.UnregisterEventHandler(handler)

  def release(self):
    self.camera = None
