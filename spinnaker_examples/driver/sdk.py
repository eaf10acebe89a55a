import importlib
import importlib.util


def load_sdk():
  """ Import the PySpin module, the Python binding shipped with the Spinnaker SDK."""
  if importlib.util.find_spec("PySpin") is None:
    raise ImportError("Please install the Spinnaker SDK and PySpin python package.")

  return importlib.import_module("PySpin")
