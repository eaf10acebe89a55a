""" Counter and timer: a PWM signal from Counter0 output on a GPIO line and used as the frame trigger.

Counter0 counts the 1MHz tick, so duration and delay are in microseconds.
The strobe line differs by camera family (Blackfly S and Oryx are supported).
"""
from functools import partial
from logging import Logger
import logging

from spinnaker_examples.config import CounterSettings, ExampleConfig
from spinnaker_examples.driver import Camera, SettingList, SpinSystem
from spinnaker_examples.image import ImageSaver

from . import common, trigger


def duty_cycle(duration:int, delay:int) -> int:
  return int(duration / (duration + delay) * 100)


def pulse_rate(duration:int, delay:int) -> int:
  return int(1000000 / (duration + delay))


def counter_settings(settings:CounterSettings) -> SettingList:
  return [
    {"CounterSelector": "Counter0"},
    {"CounterEventSource": "MHzTick"},
    {"CounterDuration": settings.duration},
    {"CounterDelay": settings.delay},
    {"CounterTriggerSource": "FrameTriggerWait"},
    {"CounterTriggerActivation": "LevelHigh"},
  ]


strobe_settings = {
  "BFS": [
    {"LineSelector": "Line1"},
    {"LineSource": "Counter0Active"},
    # Line 2 supplies 3.3V to power the opto-isolated output on Line 1
    {"LineSelector": "Line2"},
    {"V3_3Enable": True},
  ],

  "ORX": [
    {"LineSelector": "Line2"},
    {"LineMode": "Output"},
    {"LineSource": "Counter0Active"},
  ],
}


def exposure_trigger_settings(settings:CounterSettings) -> SettingList:
  return [
    {"ExposureAuto": "Off"},
    {"ExposureTime": settings.exposure_time_us},
    {"TriggerMode": "Off"},
    {"TriggerSource": "Counter0Start"},
    {"TriggerOverlap": "ReadOut"},
    {"TriggerMode": "On"},
  ]


def camera_family(model:str) -> str:
  for family in strobe_settings:
    if family in model:
      return family
  return ""


@common.step
def setup_counter_and_timer(camera:Camera, settings:CounterSettings):
  camera.logger.info("Configuring Pulse Width Modulation signal")
  camera.nodemap.set_settings(counter_settings(settings), logger=camera.logger)

  camera.logger.info(f"The duty cycle has been set to {duty_cycle(settings.duration, settings.delay)} %")
  camera.logger.info(f"The pulse rate has been set to {pulse_rate(settings.duration, settings.delay)} Hz")


@common.step
def configure_digital_io(camera:Camera):
  camera.logger.info("Configuring GPIO strobe output")
  nodemap = camera.nodemap

  model = str(nodemap.get_value("DeviceModelName"))
  family = camera_family(model)

  if family == "":
    camera.log(logging.WARNING, f"Camera family of {model} not recognised, only setting the line source")
    nodemap.set_value("LineSource", "Counter0Active")
  else:
    nodemap.set_settings(strobe_settings[family], logger=camera.logger)


@common.step
def configure_exposure_and_trigger(camera:Camera, settings:CounterSettings):
  camera.logger.info("Configuring Exposure and Trigger")
  camera.nodemap.set_settings(exposure_trigger_settings(settings), logger=camera.logger)
  camera.log(logging.INFO, "Trigger mode enabled...")


def run_single_camera(camera:Camera, config:ExampleConfig, saver:ImageSaver) -> bool:
  settings = config.acquisition
  result = camera.log_device_info()

  with camera.initialized():
    if not (setup_counter_and_timer(camera, config.counter)
        and configure_digital_io(camera)
        and configure_exposure_and_trigger(camera, config.counter)):
      return False

    result &= common.acquire_images(camera, saver, "CounterAndTimer",
      settings.num_images, settings.timeout_ms)

    result &= trigger.reset_trigger(camera)

  return result


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  saver = ImageSaver.from_settings(system.sdk, config.acquisition)
  return common.run_each_camera(system, logger,
    partial(run_single_camera, config=config, saver=saver),
    output_dir=config.acquisition.output_dir)
