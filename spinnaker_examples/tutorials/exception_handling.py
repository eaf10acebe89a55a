""" Telling SDK errors apart from ordinary python errors.

SDK failures raise `SpinnakerException`, which carries an error code as well
as a message. Three cases are shown: catching the SDK exception directly,
catching an ordinary exception, and catching broadly and then checking
whether the error came from the SDK.
"""
from logging import Logger

from spinnaker_examples.config import ExampleConfig, ExceptionType
from spinnaker_examples.driver import SpinSystem

from . import common


def cause_spinnaker_exception(system:SpinSystem, logger:Logger) -> bool:
  """ Starting acquisition on a camera which was never initialized raises from the SDK."""
  with system.camera_list() as cameras:
    logger.info("Camera list retrieved...")
    if not common.enough_cameras(cameras, logger):
      return False

    cameras[0].camera.BeginAcquisition()
  return True


def cause_standard_exception(logger:Logger):
  numbers = list(range(10))
  logger.info("List initialized...")
  logger.info(f"The highest number in the list is {numbers[len(numbers)]}.")


def log_spinnaker_exception(e, logger:Logger):
  logger.info(f"Error: {e}")
  logger.info(f"Error code {getattr(e, 'errorcode', 'unknown')}.")


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  common.log_library_version(system, logger)
  exception_type = config.exceptions.exception_type

  if exception_type == ExceptionType.spinnaker:
    try:
      return cause_spinnaker_exception(system, logger)
    except system.sdk.SpinnakerException as e:
      logger.info("Spinnaker exception caught.")
      log_spinnaker_exception(e, logger)

  elif exception_type == ExceptionType.standard:
    try:
      cause_standard_exception(logger)
    except IndexError as e:
      logger.info("Standard exception caught.")
      logger.info(f"Error: {e}.")

  else:
    try:
      return cause_spinnaker_exception(system, logger)
    except Exception as e:
      logger.info("Standard exception caught; checking whether it is a Spinnaker exception.")
      if isinstance(e, system.sdk.SpinnakerException):
        log_spinnaker_exception(e, logger)
      else:
        logger.info(f"Not a Spinnaker exception: {type(e).__name__}.")
        logger.info(f"Error: {e}.")

  return True
