""" Node callbacks: be notified whenever a node's value changes.

Callbacks are registered on Height and Gain, both are then changed and the
callbacks report the new values before being deregistered.
"""
from functools import partial
from logging import Logger
import logging

from beartype.typing import Dict, List, Tuple

from spinnaker_examples.config import ExampleConfig
from spinnaker_examples.driver import Camera, NodeMap, SpinSystem, events

from . import common


watched_nodes = ["Height", "Gain"]


class NodeUpdates():
  def __init__(self, nodemap:NodeMap, logger:Logger):
    self.nodemap = nodemap
    self.logger = logger
    self.updates: List[Tuple[str, object]] = []

  def on_node_update(self, node_name:str, node):
    # Callbacks receive the untyped node
    value = self.nodemap.typed(node).GetValue()
    self.logger.info(f"{node_name} callback message:")
    self.logger.info(f"\t{node_name} changed to {value}...")
    self.updates.append((node_name, value))


@common.step
def configure_callbacks(camera:Camera, bridge:events.EventBridge, callbacks:Dict[str, object]):
  camera.logger.info("*** CONFIGURING CALLBACKS ***")
  nodemap = camera.nodemap
  sdk = camera.sdk

  nodemap.set_value("GainAuto", "Off")
  camera.log(logging.INFO, "Automatic gain disabled...")

  for name in watched_nodes:
    callback = events.node_callback(sdk, bridge, name)
    sdk.RegisterNodeCallback(nodemap.get_writable(name), callback)
    callbacks[name] = callback
    camera.log(logging.INFO, f"{name} callback registered...")


@common.step
def change_height_and_gain(camera:Camera):
  camera.logger.info("*** CHANGE HEIGHT & GAIN ***")
  nodemap = camera.nodemap

  height = nodemap.value_range("Height")[1]
  camera.logger.info(f"Regular function message: height about to be changed to {height}...")
  nodemap.set_value("Height", height)

  gain = nodemap.value_range("Gain")[1] / 2.0
  camera.logger.info(f"Regular function message: gain about to be changed to {gain}...")
  nodemap.set_value("Gain", gain)


@common.step
def reset_callbacks(camera:Camera, callbacks:Dict[str, object]):
  for name, callback in list(callbacks.items()):
    camera.sdk.DeregisterNodeCallback(callback)
    del callbacks[name]
    camera.log(logging.INFO, f"{name} callback unregistered...")

  camera.nodemap.set_value("GainAuto", "Continuous")
  camera.log(logging.INFO, "Automatic gain enabled...")


def run_single_camera(camera:Camera, config:ExampleConfig) -> bool:
  result = camera.log_device_info()

  updates = NodeUpdates(camera.nodemap, camera.logger)
  bridge = events.EventBridge()
  bridge.bind(on_node_update=updates.on_node_update)

  callbacks = {}
  with camera.initialized():
    try:
      if not configure_callbacks(camera, bridge, callbacks):
        return False

      result &= change_height_and_gain(camera)
    finally:
      result &= reset_callbacks(camera, callbacks)

  return result


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  return common.run_each_camera(system, logger, partial(run_single_camera, config=config))
