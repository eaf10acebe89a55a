""" Sequencer: cycle through a set of camera states, changing settings image to image.

Each state grows the region of interest, exposure time and gain a little,
and points at the next state, the last state loops back to the first.
Configuration happens in two parts. Part one disables the sequencer and
automatic exposure/gain and enters configuration mode. Part two leaves
configuration mode, enables the sequencer and checks that the configuration
is valid.
"""
from dataclasses import dataclass
from functools import partial
from logging import Logger
import logging

from beartype import beartype
from beartype.typing import List, Tuple

from spinnaker_examples.config import ExampleConfig, SequencerSettings
from spinnaker_examples.driver import Camera, NodeException, NodeMap, SpinSystem
from spinnaker_examples.driver.helpers import clamp, round_down
from spinnaker_examples.image import ImageSaver

from . import common
from .exposure import exposure_timeout_ms


@dataclass
class SequenceState:
  index: int
  width: int
  height: int
  exposure_time: float
  gain: float
  next_state: int


@beartype
def sequence_states(num_sequences:int, width:Tuple[int, int], height:Tuple[int, int],
                    exposure_range:Tuple[float, float], gain_range:Tuple[float, float],
                    exposure_time_max:float=2000000.0) -> List[SequenceState]:
  """ Ramp of sequencer states.

  width and height are (max, increment) pairs. Size starts at a quarter of
  the maximum and grows by a tenth of it each state. Exposure and gain start
  at their minimum, growing by a tenth of the (capped) maximum exposure and a
  fiftieth of the maximum gain, clamped to their ranges.
  """
  width_max, width_inc = width
  height_max, height_inc = height

  exposure_min, exposure_max = exposure_range
  exposure_step = min(exposure_max, exposure_time_max) / 10.0

  gain_min, gain_max = gain_range
  gain_step = gain_max / 50.0

  states = []
  for i in range(num_sequences):
    states.append(SequenceState(
      index=i,
      width=round_down(width_max // 4 + i * (width_max // 10), width_inc),
      height=round_down(height_max // 4 + i * (height_max // 10), height_inc),
      exposure_time=clamp(exposure_min + i * exposure_step, exposure_min, exposure_max),
      gain=clamp(gain_min + i * gain_step, gain_min, gain_max),
      next_state=0 if i == num_sequences - 1 else i + 1
    ))
  return states


def states_for(nodemap:NodeMap, settings:SequencerSettings) -> List[SequenceState]:
  return sequence_states(settings.num_sequences,
    width=(int(nodemap.value_range("Width")[1]), int(nodemap.increment("Width"))),
    height=(int(nodemap.value_range("Height")[1]), int(nodemap.increment("Height"))),
    exposure_range=tuple(float(x) for x in nodemap.value_range("ExposureTime")),
    gain_range=tuple(float(x) for x in nodemap.value_range("Gain")),
    exposure_time_max=settings.exposure_time_max_us)


@common.step
def configure_sequencer_part_one(camera:Camera):
  camera.logger.info("*** CONFIGURING SEQUENCER ***")
  nodemap = camera.nodemap

  # The sequencer must be off before it can be configured
  if nodemap.get_value("SequencerConfigurationValid") == "Yes":
    nodemap.set_value("SequencerMode", "Off")
  camera.log(logging.INFO, "Sequencer mode disabled...")

  nodemap.set_value("ExposureAuto", "Off")
  camera.log(logging.INFO, "Automatic exposure disabled...")

  nodemap.set_value("GainAuto", "Off")
  camera.log(logging.INFO, "Automatic gain disabled...")

  nodemap.set_value("SequencerConfigurationMode", "On")
  camera.log(logging.INFO, "Sequencer configuration mode enabled...")


@common.step
def set_single_state(camera:Camera, state:SequenceState):
  nodemap = camera.nodemap

  nodemap.set_value("SequencerSetSelector", state.index)
  camera.logger.info(f"Setting state {state.index}...")

  # ROI is not part of the sequencer set on every camera model
  for name, value in [("Width", state.width), ("Height", state.height)]:
    if nodemap.is_writable(name):
      nodemap.set_value(name, value)
      camera.logger.info(f"\t{name} set to {nodemap.get_value(name)}...")
    else:
      camera.logger.info(f"\tUnable to set {name.lower()}; {name.lower()} for sequencer not available on all camera models...")

  nodemap.set_value("ExposureTime", state.exposure_time)
  camera.logger.info(f"\tExposure time set to {nodemap.get_value('ExposureTime')}...")

  nodemap.set_value("Gain", state.gain)
  camera.logger.info(f"\tGain set to {nodemap.get_value('Gain')}...")

  nodemap.set_value("SequencerTriggerSource", "FrameStart")
  camera.logger.info("\tTrigger source set...")

  nodemap.set_value("SequencerSetNext", state.next_state)
  camera.logger.info(f"\tNext state set to {state.next_state}...")

  nodemap.execute("SequencerSetSave")
  camera.logger.info(f"\tState {state.index} saved...")


@common.step
def configure_sequencer_part_two(camera:Camera):
  nodemap = camera.nodemap

  nodemap.set_value("SequencerConfigurationMode", "Off")
  camera.log(logging.INFO, "Sequencer configuration mode disabled...")

  nodemap.set_value("SequencerMode", "On")
  camera.log(logging.INFO, "Sequencer mode enabled...")

  if nodemap.get_value("SequencerConfigurationValid") != "Yes":
    camera.log(logging.ERROR, "Sequencer configuration not valid. Aborting...")
    return False

  camera.log(logging.INFO, "Sequencer valid.")


@common.step
def reset_sequencer(camera:Camera):
  camera.nodemap.set_settings([
    {"SequencerMode": "Off"},
    {"ExposureAuto": "Continuous"},
    {"GainAuto": "Continuous"},
  ], logger=camera.logger)
  camera.log(logging.INFO, "Sequencer mode disabled, automatic exposure and gain enabled...")


def configure_and_acquire(camera:Camera, config:ExampleConfig, saver:ImageSaver) -> bool:
  try:
    states = states_for(camera.nodemap, config.sequencer)
  except (NodeException, camera.sdk.SpinnakerException) as e:
    camera.log(logging.ERROR, f"Unable to read sequencer ranges: {e}")
    return False

  for state in states:
    if not set_single_state(camera, state):
      return False

  if not configure_sequencer_part_two(camera):
    return False

  timeout_ms = exposure_timeout_ms(max((state.exposure_time for state in states), default=0.0))
  return common.acquire_images(camera, saver, "Sequencer", config.acquisition.num_images, timeout_ms)


def run_single_camera(camera:Camera, config:ExampleConfig, saver:ImageSaver) -> bool:
  result = camera.log_device_info()

  with camera.initialized():
    if not configure_sequencer_part_one(camera):
      camera.logger.warning("The sequencer may not be available on all camera models, "
        "please try a Blackfly S camera.")
      return False

    try:
      result &= configure_and_acquire(camera, config, saver)
    finally:
      result &= reset_sequencer(camera)

  return result


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  saver = ImageSaver.from_settings(system.sdk, config.acquisition)
  return common.run_each_camera(system, logger,
    partial(run_single_camera, config=config, saver=saver),
    output_dir=config.acquisition.output_dir)
