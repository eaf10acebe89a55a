""" Software or hardware triggered acquisition.

Trigger mode must be off while the selector and source are changed. With a
software trigger, each image is requested by executing TriggerSoftware just
before it is grabbed. With a hardware trigger the camera waits on the
configured line.
"""
from functools import partial
from logging import Logger
import logging

from spinnaker_examples.config import ExampleConfig, TriggerSettings, TriggerType
from spinnaker_examples.driver import Camera, SpinSystem
from spinnaker_examples.image import ImageSaver

from . import common


def trigger_source(settings:TriggerSettings) -> str:
  return "Software" if settings.trigger_type == TriggerType.software else settings.hardware_source


@common.step
def configure_trigger(camera:Camera, settings:TriggerSettings):
  camera.logger.info("*** CONFIGURING TRIGGER ***")
  camera.logger.info("Note that if the application / user software triggers faster than frame time, "
    "the trigger may be dropped / skipped by the camera.")

  camera.logger.info(f"{settings.trigger_type.name.capitalize()} trigger chosen...")
  nodemap = camera.nodemap

  nodemap.set_value("TriggerMode", "Off")
  camera.log(logging.INFO, "Trigger mode disabled...")

  nodemap.set_value("TriggerSelector", settings.selector)
  camera.log(logging.INFO, f"Trigger selector set to {settings.selector}...")

  source = trigger_source(settings)
  nodemap.set_value("TriggerSource", source)
  camera.log(logging.INFO, f"Trigger source set to {source}...")

  nodemap.set_value("TriggerMode", "On")
  camera.log(logging.INFO, "Trigger mode enabled...")


def fire_trigger(camera:Camera, settings:TriggerSettings, i:int=0):
  """ Request the next image, software triggers optionally wait for Enter first."""
  if settings.trigger_type == TriggerType.software:
    if settings.wait_for_keypress:
      input("Press the Enter key to initiate software trigger.")
    camera.nodemap.execute("TriggerSoftware")
  else:
    camera.logger.info("Use the hardware to trigger image acquisition.")


@common.step
def reset_trigger(camera:Camera):
  camera.nodemap.set_value("TriggerMode", "Off")
  camera.log(logging.INFO, "Trigger mode disabled...")


def run_single_camera(camera:Camera, config:ExampleConfig, saver:ImageSaver) -> bool:
  settings = config.acquisition
  result = camera.log_device_info()

  with camera.initialized():
    if not configure_trigger(camera, config.trigger):
      return False

    result &= common.acquire_images(camera, saver, "Trigger",
      settings.num_images, settings.timeout_ms,
      before_grab=partial(fire_trigger, camera, config.trigger))

    result &= reset_trigger(camera)

  return result


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  saver = ImageSaver.from_settings(system.sdk, config.acquisition)
  return common.run_each_camera(system, logger,
    partial(run_single_camera, config=config, saver=saver),
    output_dir=config.acquisition.output_dir)
