""" Forward the SDK's own log events into python logging.

Once registered the handler receives every SDK log message at or above the
configured priority. Enumerating cameras is enough to produce a few.
"""
from logging import Logger
import logging

from spinnaker_examples.config import ExampleConfig
from spinnaker_examples.driver import SpinSystem, events

from . import common


priority_levels = {
  "DEBUG": logging.DEBUG,
  "INFO": logging.INFO,
  "NOTICE": logging.INFO,
  "WARN": logging.WARNING,
  "ERROR": logging.ERROR,
  "CRIT": logging.CRITICAL,
  "ALERT": logging.CRITICAL,
  "FATAL": logging.CRITICAL,
}


def python_level(priority_name:str) -> int:
  return priority_levels.get(priority_name.upper(), logging.INFO)


class LogForwarder():
  def __init__(self, logger:Logger):
    self.logger = logger
    self.received = 0

  def on_log_event(self, data):
    self.received += 1
    self.logger.log(python_level(data.GetPriorityName()),
      f"[{data.GetCategoryName()}] {data.GetPriorityName()} {data.GetTimestamp()} "
      f"thread {data.GetThreadName()} ndc {data.GetNDC()}: {data.GetLogMessage()}")


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  common.log_library_version(system, logger)

  forwarder = LogForwarder(logger.getChild("spinnaker"))
  bridge = events.EventBridge()
  bridge.bind(on_log_event=forwarder.on_log_event)

  handler = events.logging_event_handler(system.sdk, bridge)
  system.register_logging_event_handler(handler, config.logging.sdk_level)
  try:
    logger.info(f"Number of cameras detected: {system.camera_count()}")
  finally:
    system.unregister_logging_event_handler(handler)

  logger.info(f"{forwarder.received} log events received")
  return True
