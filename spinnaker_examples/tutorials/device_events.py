""" Device events: notifications sent by the camera itself, such as the end of an exposure.

A handler registered generally receives every enabled device event, one
registered for a specific event name only receives that event. Either way
only events matching the watched name are counted.
"""
from functools import partial
from logging import Logger
import logging
import threading

from spinnaker_examples.config import DeviceEventSettings, EventRegistration, ExampleConfig
from spinnaker_examples.driver import Camera, SpinSystem, events
from spinnaker_examples.image import ImageSaver

from . import common


class DeviceEventCounter():
  def __init__(self, event_name:str, logger:Logger):
    self.event_name = event_name
    self.logger = logger

    self.count = 0
    self.ignored = 0
    self.lock = threading.Lock()

  def on_device_event(self, event_name:str, event_id:int=0, device_event_name:str=""):
    with self.lock:
      if event_name == self.event_name:
        self.count += 1
        self.logger.info(f"\tDevice event {device_event_name} with ID {event_id} number {self.count}...")
      else:
        self.ignored += 1
        self.logger.info(f"\tDevice event occurred; not {self.event_name}; ignoring...")


@common.step
def enable_event_notifications(camera:Camera):
  nodemap = camera.nodemap
  camera.logger.info("Enabling event selector entries...")

  enabled = True
  for entry in nodemap.entries("EventSelector"):
    nodemap.set_value("EventSelector", entry)

    if nodemap.try_set_value("EventNotification", "On"):
      camera.logger.info(f"\t{entry}: enabled...")
    else:
      camera.logger.warning(f"\t{entry}: unable to enable notification")
      enabled = False

  return enabled


def register_handler(camera:Camera, handler, settings:DeviceEventSettings):
  if settings.registration == EventRegistration.generic:
    camera.register_event_handler(handler)
    camera.log(logging.INFO, "Device event handler registered generally...")
  else:
    camera.register_event_handler(handler, settings.event_name)
    camera.log(logging.INFO, f"Device event handler registered specifically to {settings.event_name} events...")


def run_single_camera(camera:Camera, config:ExampleConfig, saver:ImageSaver) -> bool:
  settings = config.acquisition
  result = camera.log_device_info()

  counter = DeviceEventCounter(config.device_events.event_name, camera.logger)
  bridge = events.EventBridge()
  bridge.bind(on_device_event=counter.on_device_event)

  with camera.initialized():
    camera.logger.info("*** CONFIGURING DEVICE EVENTS ***")

    # A missing notification for one entry is not fatal, the watched event may still be enabled
    result &= enable_event_notifications(camera)

    handler = events.device_event_handler(camera.sdk, bridge)
    register_handler(camera, handler, config.device_events)

    try:
      result &= common.acquire_images(camera, saver, "DeviceEvents",
        settings.num_images, settings.timeout_ms)
    finally:
      camera.unregister_event_handler(handler)
      camera.log(logging.INFO, "Device event handler unregistered...")

  camera.log(logging.INFO, f"{counter.count} {counter.event_name} events received")
  return result


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  saver = ImageSaver.from_settings(system.sdk, config.acquisition)
  return common.run_each_camera(system, logger,
    partial(run_single_camera, config=config, saver=saver),
    output_dir=config.acquisition.output_dir)
