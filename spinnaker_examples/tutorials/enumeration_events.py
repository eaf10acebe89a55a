""" Arrival and removal events for interfaces and cameras.

A system handler reports interfaces coming and going and attaches an
interface handler to each new interface. A further interface handler on the
system reports the total number of cameras whenever a camera arrives or is
removed from any interface.
"""
from logging import Logger
import threading
import time

from beartype.typing import Dict, Optional, Tuple

from spinnaker_examples.config import EnumerationEventSettings, ExampleConfig
from spinnaker_examples.driver import NodeMap, SpinSystem
from spinnaker_examples.driver import events

from . import common


def device_count_message(count:int) -> str:
  if count == 1:
    return "There is 1 device on the system."
  return f"There are {count} devices on the system."


class EnumerationListener():
  """ Keeps one interface event handler per interface, keyed by interface ID."""

  def __init__(self, system:SpinSystem, logger:Logger):
    self.system = system
    self.sdk = system.sdk
    self.logger = logger

    self.bridge = events.EventBridge()
    self.bridge.bind(
      on_interface_arrival=self.on_interface_arrival,
      on_interface_removal=self.on_interface_removal,
      on_device_arrival=self.on_device_arrival,
      on_device_removal=self.on_device_removal,
    )

    self.lock = threading.Lock()
    self.interface_handlers: Dict[str, Tuple[object, object]] = {}

    self.system_handler = events.system_event_handler(self.sdk, self.bridge)
    self.system_interface_handler: Optional[object] = None
    self.registered = False

  def interface_id(self, interface) -> Optional[str]:
    return NodeMap(self.sdk, interface.GetTLNodeMap()).try_get_value("InterfaceID")

  def serial(self, camera) -> str:
    return str(NodeMap(self.sdk, camera.GetTLDeviceNodeMap()).try_get_value("DeviceSerialNumber", ""))

  def register_interface(self, interface, interface_id:str):
    handler = events.interface_event_handler(self.sdk, self.bridge, interface_id)
    with self.lock:
      interface.RegisterEventHandler(handler)
      self.interface_handlers[interface_id] = (interface, handler)
    self.logger.info(f"Event handler registered to interface '{interface_id}'...")

  def on_interface_arrival(self, interface):
    interface_id = self.interface_id(interface)
    self.logger.info(f"System event handler: interface '{interface_id}' has arrived on the system.")
    self.system.update_interfaces()

    camera_list = interface.GetCameras()
    for i in range(camera_list.GetSize()):
      serial = self.serial(camera_list.GetByIndex(i))
      self.logger.info(f"\tDevice {serial} is connected to interface '{interface_id}'.")
    camera_list.Clear()

    try:
      self.register_interface(interface, interface_id)
    except self.sdk.SpinnakerException as e:
      self.logger.error(f"Error registering interface event handler to '{interface_id}': {e}")

  def on_interface_removal(self, interface):
    interface_id = self.interface_id(interface)
    self.logger.info(f"System event handler: interface '{interface_id}' was removed from the system.")
    self.system.update_interfaces()

    with self.lock:
      self.interface_handlers.pop(interface_id, None)

  def on_device_arrival(self, camera, interface_id:str=""):
    if interface_id == "":
      self.logger.info(f"Generic interface event handler: {device_count_message(self.system.camera_count())}")
    else:
      self.logger.info(f"Interface event handler: device {self.serial(camera)} has arrived on interface {interface_id}.")

  def on_device_removal(self, camera, interface_id:str=""):
    if interface_id == "":
      self.logger.info(f"Generic interface event handler: {device_count_message(self.system.camera_count())}")
    else:
      self.logger.info(f"Interface event handler: device {self.serial(camera)} was removed from interface {interface_id}.")

  def register(self):
    self.system.register_event_handler(self.system_handler)
    self.registered = True

    self.system_interface_handler = events.interface_event_handler(self.sdk, self.bridge)
    self.system.register_interface_event_handler(self.system_interface_handler)
    self.logger.info("Interface event handler registered on the system...")

    with self.system.interface_list() as interfaces:
      for interface in interfaces:
        interface_id = self.interface_id(interface)
        if interface_id is not None:
          self.register_interface(interface, interface_id)

  def unregister(self):
    """ Unregister in the reverse order of registration."""
    with self.lock:
      for interface_id, (interface, handler) in self.interface_handlers.items():
        try:
          interface.UnregisterEventHandler(handler)
        except self.sdk.SpinnakerException as e:
          self.logger.error(f"Error removing event handler from interface '{interface_id}': {e}")
      self.interface_handlers.clear()
    self.logger.info("Event handler unregistered from interfaces...")

    if self.system_interface_handler is not None:
      self.system.unregister_interface_event_handler(self.system_interface_handler)
      self.system_interface_handler = None
      self.logger.info("Interface event handler unregistered from system...")

    if self.registered:
      self.system.unregister_event_handler(self.system_handler)
      self.registered = False
      self.logger.info("System event handler unregistered from system...")

  @property
  def registered_interfaces(self):
    with self.lock:
      return list(self.interface_handlers.keys())


def wait_for_events(settings:EnumerationEventSettings, logger:Logger):
  if settings.duration_sec > 0:
    logger.info(f"Ready! Remove/Plug in cameras to test, waiting {settings.duration_sec} seconds...")
    time.sleep(settings.duration_sec)
  else:
    input("Ready! Remove/Plug in cameras to test or press Enter to exit...")


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  common.log_library_version(system, logger)
  system.gev_enumeration_enabled()

  logger.info(f"Number of cameras detected: {system.camera_count()}")
  with system.interface_list() as interfaces:
    logger.info(f"Number of interfaces detected: {len(interfaces)}")

  logger.info("*** CONFIGURING ENUMERATION EVENTS ***")
  listener = EnumerationListener(system, logger)

  try:
    listener.register()
    wait_for_events(config.enumeration_events, logger)
    return True

  except system.sdk.SpinnakerException as e:
    logger.error(f"Error: {e}")
    return False

  finally:
    listener.unregister()
