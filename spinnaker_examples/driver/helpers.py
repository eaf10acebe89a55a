
from numbers import Number
from beartype.typing import Any, List, Optional, Tuple
from beartype import beartype

from fuzzywuzzy import process

from .interface import SettingList


def suggest_node(nodemap, k, threshold=50):
  names = [node.GetName() for node in nodemap.GetNodes()]
  if k in names:
    return "Node {} exists, but not available".format(k)

  if len(names) == 0:
    return f"Node {k} not available"

  nearest, score = process.extractOne(k, names)
  suggest = "" if score < threshold else ", did you mean '{}' ({})?".format(nearest, score)
  return f"Node {k} not available{suggest}"


class NodeException(RuntimeError):
  def __init__(self, msg):
    super(NodeException, self).__init__(msg)


def dict_item(d):
  k = next(iter(d)) # setting.keys()[0]
  v = d[k]
  return k, v


class NodeMap:
  """ Name based access to a GenICam node map.

  Nodes are looked up by name and cast to their principal interface type,
  enumerations are read and written by symbolic entry name.
  """

  def __init__(self, sdk, nodemap):
    self.sdk = sdk
    self.nodemap = nodemap

    self.node_types = {
      sdk.intfIInteger: sdk.CIntegerPtr,
      sdk.intfIBoolean: sdk.CBooleanPtr,
      sdk.intfICommand: sdk.CCommandPtr,
      sdk.intfIFloat: sdk.CFloatPtr,
      sdk.intfIString: sdk.CStringPtr,
      sdk.intfICategory: sdk.CCategoryPtr,
      sdk.intfIEnumeration: sdk.CEnumerationPtr,
    }

  def raw(self, node_name:str):
    node = self.nodemap.GetNode(node_name)
    if node is None:
      raise NodeException(suggest_node(self.nodemap, node_name))
    return node

  def interface_type(self, node) -> int:
    return node.GetPrincipalInterfaceType()

  def typed(self, node):
    t = self.interface_type(node)
    if t not in self.node_types:
      raise NodeException(f'Node type for {node.GetName()} not supported {t}')
    return self.node_types[t](node)

  def node(self, node_name:str):
    return self.typed(self.raw(node_name))

  def is_available(self, node_name:str) -> bool:
    node = self.nodemap.GetNode(node_name)
    return node is not None and self.sdk.IsAvailable(node)

  def is_readable(self, node_name:str) -> bool:
    return self.is_available(node_name) and self.sdk.IsReadable(self.raw(node_name))

  def is_writable(self, node_name:str) -> bool:
    return self.is_available(node_name) and self.sdk.IsWritable(self.raw(node_name))

  def get_readable(self, node_name:str):
    node = self.node(node_name)
    if not self.sdk.IsAvailable(node):
      raise NodeException(suggest_node(self.nodemap, node_name))

    if not self.sdk.IsReadable(node):
      raise NodeException('Node not readable {}. '.format(node_name))
    return node

  def get_writable(self, node_name:str):
    node = self.node(node_name)
    if not self.sdk.IsAvailable(node):
      raise NodeException(suggest_node(self.nodemap, node_name))

    if not self.sdk.IsWritable(node):
      raise NodeException('Node not writable {}. '.format(node_name))
    return node

  def get_value(self, node_name:str):
    node = self.get_readable(node_name)
    t = self.interface_type(node)

    if t == self.sdk.intfIEnumeration:
      return node.GetCurrentEntry().GetSymbolic()
    elif t == self.sdk.intfICommand:
      raise NodeException(f'Command node {node_name} has no value')
    return node.GetValue()

  def try_get_value(self, node_name:str, default=None):
    try:
      return self.get_value(node_name)
    except NodeException:
      return default

  def set_value(self, node_name:str, value:Any):
    node = self.get_writable(node_name)
    t = self.interface_type(node)

    try:
      if t == self.sdk.intfIEnumeration:
        entry = node.GetEntryByName(value)
        if entry is None or not self.sdk.IsAvailable(entry):
            raise NodeException('Entry not available {} - {}. '.format(node_name, value))

        if not self.sdk.IsReadable(entry):
            raise NodeException('Entry not readable {} - {} '.format(node_name, value))

        node.SetIntValue(entry.GetValue())

      elif t == self.sdk.intfIBoolean:
        node.SetValue(bool(value))
      elif t == self.sdk.intfIFloat:
        node.SetValue(float(value))
      elif t == self.sdk.intfIInteger:
        node.SetValue(int(value))
      elif t == self.sdk.intfIString:
        node.SetValue(str(value))
      else:
        raise NodeException(f'Node {node_name} cannot be set')

    except ValueError as e:
      raise NodeException(f"Invalid value {value} for node {node_name}: {e}")

  def try_set_value(self, node_name:str, value:Any):
    try:
      self.set_value(node_name, value)
      return True
    except (NodeException, self.sdk.SpinnakerException):
      return False

  @beartype
  def set_settings(self, settings:SettingList, logger=None):
    """ Apply an ordered list of {node_name: value} settings, stopping at the first failure."""
    for setting in settings:
      setting_name, value = dict_item(setting)
      if logger is not None:
        logger.debug(f"Setting {setting_name} to {value}")
      self.set_value(setting_name, value)

  def execute(self, node_name:str):
    node = self.raw(node_name)
    if not self.sdk.IsAvailable(node) or not self.sdk.IsWritable(node):
      raise NodeException(suggest_node(self.nodemap, node_name))

    self.sdk.CCommandPtr(node).Execute()

  def value_range(self, node_name:str) -> Tuple[Number, Number]:
    node = self.get_readable(node_name)
    return node.GetMin(), node.GetMax()

  def increment(self, node_name:str) -> int:
    return self.get_readable(node_name).GetInc()

  def entries(self, node_name:str) -> List[str]:
    """ Symbolic names of the readable entries of an enumeration node."""
    node = self.get_readable(node_name)
    entries = [self.sdk.CEnumEntryPtr(entry) for entry in node.GetEntries()]
    return [entry.GetSymbolic() for entry in entries
            if self.sdk.IsAvailable(entry) and self.sdk.IsReadable(entry)]

  def display_name(self, node_name:str) -> str:
    return self.raw(node_name).GetDisplayName()

  def to_string(self, node) -> str:
    return self.sdk.CValuePtr(node).ToString()

  def features(self, category_name:str) -> list:
    category = self.get_readable(category_name)
    return list(category.GetFeatures())

  def device_information(self) -> List[Tuple[str, str]]:
    if not self.is_readable("DeviceInformation"):
      raise NodeException("Device control information not available.")

    info = []
    for feature in self.features("DeviceInformation"):
      value = self.to_string(feature) if self.sdk.IsReadable(feature) else "Node not readable"
      info.append((feature.GetName(), value))
    return info


@beartype
def clamp(x:Number, lower:Number, upper:Number):
  return max(min(x, upper), lower)


def round_down(x:Number, inc:Optional[int]) -> int:
  if not inc:
    return int(x)
  return int(x // inc) * inc
