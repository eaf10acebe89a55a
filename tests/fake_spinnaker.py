""" In-memory stand-in for the PySpin object model.

Only the parts of the API the tutorials touch are modelled: the system
singleton, interface and camera lists, node maps of typed nodes, triggered
and free running acquisition with the four stream buffer handling modes,
images with chunk data, event handlers, node callbacks and SpinVideo.

A `FakeSpinnaker` instance plays the role of the `PySpin` module and is passed
to the code under test as `sdk`.
"""
from collections import deque
from pathlib import Path
import threading
import time

import numpy as np


intfIValue = 0
intfIBase = 1
intfIInteger = 2
intfIBoolean = 3
intfICommand = 4
intfIFloat = 5
intfIString = 6
intfIRegister = 7
intfICategory = 8
intfIEnumeration = 9
intfIEnumEntry = 10
intfIPort = 11

BUFFER_OWNERSHIP_SYSTEM = 0
BUFFER_OWNERSHIP_USER = 1


class SpinnakerException(Exception):
  def __init__(self, message, errorcode=-1001):
    super(SpinnakerException, self).__init__(f"Spinnaker: {message} [{errorcode}]")
    self.message = message
    self.errorcode = errorcode


class Node():
  interface = intfIBase

  def __init__(self, name, display_name=None, tooltip="", available=True, readable=True, writable=True):
    self.name = name
    self.display_name = display_name or name
    self.tooltip = tooltip or f"Tooltip for {name}"

    self.available = available
    self.readable = readable
    self.writable = writable

    self.nodemap = None
    self.callbacks = []

  def GetName(self):
    return self.name

  def GetDisplayName(self):
    return self.display_name

  def GetToolTip(self):
    return self.tooltip

  def GetPrincipalInterfaceType(self):
    return self.interface

  def ToString(self):
    return ""

  def attach(self, nodemap):
    self.nodemap = nodemap

  def check_writable(self):
    if not is_writable(self):
      raise SpinnakerException(f"Node {self.name} is not writable", -1010)

  def check_readable(self):
    if not is_readable(self):
      raise SpinnakerException(f"Node {self.name} is not readable", -1010)

  def notify(self):
    for callback in list(self.callbacks):
      callback.CallbackFunction(self)


class ValueNode(Node):
  """ A node holding a value, optionally one value per entry of a selector node."""

  def __init__(self, name, value=None, selector=None, on_change=None, **kwargs):
    super(ValueNode, self).__init__(name, **kwargs)
    self.default = value
    self.values = {}

    self.selector = selector
    self.on_change = on_change

  def key(self):
    if self.selector is None:
      return None
    return self.nodemap.GetNode(self.selector).ToString()

  def get(self):
    return self.values.get(self.key(), self.default)

  def put(self, value):
    self.values[self.key()] = value
    if self.on_change is not None:
      self.on_change(self, value)
    self.notify()

  def GetValue(self):
    self.check_readable()
    return self.get()

  def SetValue(self, value):
    self.check_writable()
    self.put(value)

  def ToString(self):
    return str(self.get())


class IntegerNode(ValueNode):
  interface = intfIInteger

  def __init__(self, name, value=0, min=0, max=1 << 31, inc=1, **kwargs):
    super(IntegerNode, self).__init__(name, value, **kwargs)
    self.min, self.max, self.inc = min, max, inc

  def SetValue(self, value):
    self.check_writable()
    if not self.min <= value <= self.max:
      raise SpinnakerException(f"Value {value} out of range for {self.name} [{self.min}, {self.max}]", -1009)
    self.put(int(value))

  def GetMin(self):
    return self.min

  def GetMax(self):
    return self.max

  def GetInc(self):
    return self.inc


class FloatNode(IntegerNode):
  interface = intfIFloat

  def SetValue(self, value):
    self.check_writable()
    if not self.min <= value <= self.max:
      raise SpinnakerException(f"Value {value} out of range for {self.name} [{self.min}, {self.max}]", -1009)
    self.put(float(value))


class BooleanNode(ValueNode):
  interface = intfIBoolean

  def __init__(self, name, value=False, **kwargs):
    super(BooleanNode, self).__init__(name, value, **kwargs)

  def ToString(self):
    return "1" if self.get() else "0"


class StringNode(ValueNode):
  interface = intfIString

  def __init__(self, name, value="", **kwargs):
    super(StringNode, self).__init__(name, value, **kwargs)


class PayloadSizeNode(IntegerNode):
  """ Bytes in one image at the current width and height, one byte per pixel."""

  def __init__(self, name="PayloadSize", **kwargs):
    super(PayloadSizeNode, self).__init__(name, writable=False, **kwargs)

  def get(self):
    return self.nodemap.GetNode("Width").get() * self.nodemap.GetNode("Height").get()


class CommandNode(Node):
  interface = intfICommand

  def __init__(self, name, on_execute=None, **kwargs):
    super(CommandNode, self).__init__(name, **kwargs)
    self.on_execute = on_execute
    self.executed = 0

  def Execute(self):
    self.check_writable()
    self.executed += 1
    if self.on_execute is not None:
      self.on_execute()

  def IsDone(self):
    return True


class EnumEntry(Node):
  interface = intfIEnumEntry

  def __init__(self, node_name, symbolic, value, available=True):
    super(EnumEntry, self).__init__(f"EnumEntry_{node_name}_{symbolic}", display_name=symbolic,
                                    available=available, writable=False)
    self.symbolic = symbolic
    self.value = value

  def GetSymbolic(self):
    return self.symbolic

  def GetValue(self):
    return self.value

  def ToString(self):
    return self.symbolic


class EnumerationNode(ValueNode):
  interface = intfIEnumeration

  def __init__(self, name, symbols, value=None, unavailable=(), **kwargs):
    self.entries = [EnumEntry(name, symbol, i, available=symbol not in unavailable)
                    for i, symbol in enumerate(symbols)]
    super(EnumerationNode, self).__init__(name, value or symbols[0], **kwargs)

  def attach(self, nodemap):
    super(EnumerationNode, self).attach(nodemap)
    for entry in self.entries:
      entry.attach(nodemap)

  def GetEntries(self):
    return list(self.entries)

  def GetEntryByName(self, symbolic):
    for entry in self.entries:
      if entry.symbolic == symbolic:
        return entry
    return None

  def GetCurrentEntry(self):
    self.check_readable()
    return self.GetEntryByName(self.get())

  def GetIntValue(self):
    return self.GetCurrentEntry().value

  def SetIntValue(self, value):
    self.check_writable()
    for entry in self.entries:
      if entry.value == value:
        self.put(entry.symbolic)
        return
    raise SpinnakerException(f"Entry {value} does not exist for {self.name}", -1009)

  def ToString(self):
    return self.get()


class CategoryNode(Node):
  interface = intfICategory

  def __init__(self, name, features, **kwargs):
    super(CategoryNode, self).__init__(name, writable=False, **kwargs)
    self.features = features

  def GetFeatures(self):
    nodes = [self.nodemap.GetNode(name) for name in self.features]
    return [node for node in nodes if node is not None]


class FakeNodeMap():
  def __init__(self, *nodes, enabled=True):
    self.nodes = {}
    self.enabled = enabled
    self.add(*nodes)

  def add(self, *nodes):
    for node in nodes:
      node.attach(self)
      self.nodes[node.name] = node

  def remove(self, *names):
    for name in names:
      self.nodes.pop(name, None)

  def GetNode(self, name):
    return self.nodes.get(name)

  def GetNodes(self):
    return list(self.nodes.values())


def is_available(node):
  return node.available and (node.nodemap is None or node.nodemap.enabled)


def is_readable(node):
  return is_available(node) and node.readable


def is_writable(node):
  return is_available(node) and node.writable


def cast(node):
  return node


class ChunkData():
  def __init__(self, values):
    self.values = values

  def GetExposureTime(self):
    return self.values["ExposureTime"]

  def GetFrameID(self):
    return self.values["FrameID"]

  def GetGain(self):
    return self.values["Gain"]

  def GetHeight(self):
    return self.values["Height"]

  def GetOffsetX(self):
    return self.values["OffsetX"]

  def GetOffsetY(self):
    return self.values["OffsetY"]

  def GetSequencerSetActive(self):
    return self.values["SequencerSetActive"]

  def GetTimestamp(self):
    return self.values["Timestamp"]

  def GetWidth(self):
    return self.values["Width"]


class FakeImage():
  def __init__(self, width, height, frame_id, pixel_format="Mono8", chunk=None, incomplete=False):
    self.width = width
    self.height = height
    self.frame_id = frame_id
    self.pixel_format = pixel_format
    self.chunk = chunk
    self.incomplete = incomplete
    self.released = False
    self.saved = []

  def GetWidth(self):
    return self.width

  def GetHeight(self):
    return self.height

  def GetFrameID(self):
    return self.frame_id

  def GetPixelFormatName(self):
    return self.pixel_format

  def IsIncomplete(self):
    return self.incomplete

  def GetImageStatus(self):
    return 1 if self.incomplete else 0

  def GetChunkData(self):
    if self.chunk is None:
      raise SpinnakerException("Chunk data is not available", -1006)
    return ChunkData(self.chunk)

  def GetNDArray(self):
    return np.full((self.height, self.width), self.frame_id % 256, dtype=np.uint8)

  def Release(self):
    if self.released:
      raise SpinnakerException("Image already released", -1002)
    self.released = True

  def Save(self, filename):
    Path(filename).write_bytes(f"{self.pixel_format} {self.width}x{self.height} {self.frame_id}".encode())
    self.saved.append(filename)

  def converted(self, pixel_format):
    if self.released:
      raise SpinnakerException("Image has been released", -1002)
    return FakeImage(self.width, self.height, self.frame_id, pixel_format, self.chunk, self.incomplete)


class FakeImageProcessor():
  def __init__(self):
    self.algorithm = None
    self.converted = 0

  def SetColorProcessing(self, algorithm):
    self.algorithm = algorithm

  def Convert(self, image, pixel_format):
    self.converted += 1
    return image.converted(pixel_format)


class AVIOption():
  def __init__(self):
    self.frameRate = 0.0


class MJPGOption(AVIOption):
  def __init__(self):
    super(MJPGOption, self).__init__()
    self.quality = 0


class H264Option(AVIOption):
  def __init__(self):
    super(H264Option, self).__init__()
    self.bitrate = 0
    self.width = 0
    self.height = 0


class FakeVideo():
  def __init__(self):
    self.filename = None
    self.option = None
    self.images = []
    self.max_file_size = None
    self.closed = False

  def SetMaximumFileSize(self, size):
    self.max_file_size = size

  def Open(self, filename, option):
    self.filename = filename
    self.option = option

  def Append(self, image):
    if self.filename is None:
      raise SpinnakerException("Video is not open", -1002)
    self.images.append(image)

  def Close(self):
    Path(f"{self.filename}-0000.avi").write_bytes(b"RIFF")
    self.closed = True


class ImageEventHandler():
  def __init__(self):
    pass


class DeviceEventHandler():
  def __init__(self):
    self.device_event_id = 0
    self.device_event_name = ""

  def GetDeviceEventId(self):
    return self.device_event_id

  def GetDeviceEventName(self):
    return self.device_event_name


class InterfaceEventHandler():
  def __init__(self):
    pass


class SystemEventHandler():
  def __init__(self):
    pass


class LoggingEventHandler():
  def __init__(self):
    pass


class NodeCallback():
  def __init__(self):
    pass


device_event_ids = {
  "EventExposureStart": 40002,
  "EventExposureEnd": 40003,
}


class FakeCamera():
  """ A camera with the node maps of a Blackfly S (USB3) or a GigE camera.

  `missing` removes named nodes from the GenICam node map, to model cameras
  lacking a feature.
  """

  def __init__(self, serial="16000001", model="Blackfly S BFS-U3-16S2M", vendor="FLIR",
               device_type="USB3Vision", missing=(), incomplete_frames=()):
    self.serial = serial
    self.model = model
    self.vendor = vendor
    self.device_type = device_type

    self.initialized = False
    self.streaming = False
    self.valid = True

    self.lock = threading.Lock()
    self.buffers = deque()
    self.buffer_ownership = BUFFER_OWNERSHIP_SYSTEM
    self.user_buffers = None
    self.frame_id = 0
    self.incomplete_frames = set(incomplete_frames)

    self.image_handlers = []
    self.delivered = []
    self.device_handlers = []
    self.event_thread = None

    self.sequencer_sets = {}
    self.sequencer_active = 0

    self.init_count = 0
    self.acquisitions = 0

    self.tl_device_nodemap = self.build_tl_device_nodemap()
    self.stream_nodemap = self.build_stream_nodemap()
    self.nodemap = self.build_nodemap()
    self.nodemap.remove(*missing)

  @property
  def is_gige(self):
    return self.device_type == "GigEVision"

  def build_tl_device_nodemap(self):
    info = ["DeviceSerialNumber", "DeviceVendorName", "DeviceModelName", "DeviceType", "DeviceDisplayName"]
    return FakeNodeMap(
      CategoryNode("Root", ["DeviceInformation"], display_name="Root"),
      CategoryNode("DeviceInformation", info, display_name="Device Information"),
      StringNode("DeviceSerialNumber", self.serial, writable=False, display_name="Device Serial Number"),
      StringNode("DeviceVendorName", self.vendor, writable=False, display_name="Device Vendor Name"),
      StringNode("DeviceModelName", self.model, writable=False, display_name="Device Model Name"),
      EnumerationNode("DeviceType", ["USB3Vision", "GigEVision", "Mixed"], self.device_type,
        writable=False, display_name="Device Type"),
      StringNode("DeviceDisplayName", f"{self.vendor} {self.model}", writable=False,
        display_name="Device Display Name"),
    )

  def build_stream_nodemap(self):
    buffers = ["StreamBufferCountMode", "StreamBufferCountManual", "StreamBufferHandlingMode", "StreamMode"]
    return FakeNodeMap(
      CategoryNode("Root", ["BufferHandlingControl"]),
      CategoryNode("BufferHandlingControl", buffers, display_name="Buffer Handling Control"),
      EnumerationNode("StreamBufferCountMode", ["Auto", "Manual"]),
      IntegerNode("StreamBufferCountManual", 10, min=1, max=100),
      IntegerNode("StreamBufferCountResult", 0, writable=False),
      EnumerationNode("StreamBufferHandlingMode",
        ["OldestFirst", "OldestFirstOverwrite", "NewestOnly", "NewestFirst"]),
      EnumerationNode("StreamMode", ["TeledyneGigeVision", "LWF", "Socket"]),
    )

  def build_nodemap(self):
    categories = {
      "AcquisitionControl": ["AcquisitionMode", "AcquisitionFrameRate", "ExposureAuto", "ExposureTime",
        "TriggerSelector", "TriggerMode", "TriggerSource", "TriggerOverlap", "TriggerSoftware"],
      "ImageFormatControl": ["PixelFormat", "Width", "Height", "OffsetX", "OffsetY"],
      "AnalogControl": ["GainAuto", "Gain"],
      "DeviceControl": ["DeviceModelName"],
      "ChunkDataControl": ["ChunkModeActive", "ChunkSelector", "ChunkEnable", "ChunkExposureTime",
        "ChunkFrameID", "ChunkTimestamp"],
      "CounterAndTimerControl": ["CounterSelector", "CounterEventSource", "CounterDuration",
        "CounterDelay", "CounterTriggerSource", "CounterTriggerActivation"],
      "DigitalIOControl": ["LineSelector", "LineMode", "LineSource", "V3_3Enable"],
      "EventControl": ["EventSelector", "EventNotification"],
      "LUTControl": ["LUTSelector", "LUTEnable", "LUTIndex", "LUTValue"],
      "SequencerControl": ["SequencerMode", "SequencerConfigurationMode", "SequencerConfigurationValid",
        "SequencerSetSelector", "SequencerSetNext", "SequencerTriggerSource", "SequencerSetSave"],
    }
    chunk_entries = ["ExposureTime", "FrameID", "Gain", "Height", "OffsetX", "OffsetY",
                     "SequencerSetActive", "Timestamp", "Width"]

    nodemap = FakeNodeMap(
      CategoryNode("Root", list(categories.keys())),
      *[CategoryNode(name, features) for name, features in categories.items()],

      EnumerationNode("AcquisitionMode", ["Continuous", "SingleFrame", "MultiFrame"]),
      FloatNode("AcquisitionFrameRate", 30.0, min=1.0, max=226.0),
      EnumerationNode("ExposureAuto", ["Off", "Once", "Continuous"], "Continuous"),
      FloatNode("ExposureTime", 15000.0, min=6.0, max=30000000.0),

      EnumerationNode("TriggerSelector", ["FrameStart", "AcquisitionStart"]),
      EnumerationNode("TriggerMode", ["Off", "On"]),
      EnumerationNode("TriggerSource", ["Software", "Line0", "Line1", "Line2", "Line3", "Counter0Start"]),
      EnumerationNode("TriggerOverlap", ["Off", "ReadOut"]),
      CommandNode("TriggerSoftware", on_execute=self.trigger),

      EnumerationNode("PixelFormat", ["Mono8", "Mono16", "BayerRG8", "RGB8Packed"]),
      IntegerNode("Width", 1024, min=16, max=1440, inc=4),
      IntegerNode("Height", 768, min=8, max=1080, inc=2),
      IntegerNode("OffsetX", 16, min=0, max=1424, inc=4),
      IntegerNode("OffsetY", 8, min=0, max=1072, inc=2),
      PayloadSizeNode(),

      EnumerationNode("GainAuto", ["Off", "Once", "Continuous"], "Continuous"),
      FloatNode("Gain", 0.0, min=0.0, max=47.99),

      StringNode("DeviceModelName", self.model, writable=False),

      BooleanNode("ChunkModeActive", False),
      EnumerationNode("ChunkSelector", ["Image", "CRC"] + chunk_entries, unavailable=("CRC",)),
      BooleanNode("ChunkEnable", False, selector="ChunkSelector"),
      FloatNode("ChunkExposureTime", 0.0, writable=False),
      IntegerNode("ChunkFrameID", 0, writable=False),
      IntegerNode("ChunkTimestamp", 0, writable=False),

      EnumerationNode("CounterSelector", ["Counter0", "Counter1"]),
      EnumerationNode("CounterEventSource", ["Off", "MHzTick"]),
      IntegerNode("CounterDuration", 1, min=1, max=1048575),
      IntegerNode("CounterDelay", 0, min=0, max=1048575),
      EnumerationNode("CounterTriggerSource", ["Off", "FrameTriggerWait", "ExposureStart"]),
      EnumerationNode("CounterTriggerActivation", ["RisingEdge", "LevelHigh", "LevelLow"]),

      EnumerationNode("LineSelector", ["Line0", "Line1", "Line2", "Line3"]),
      EnumerationNode("LineMode", ["Input", "Output"], selector="LineSelector"),
      EnumerationNode("LineSource", ["Off", "Counter0Active", "ExposureActive"], selector="LineSelector"),
      BooleanNode("V3_3Enable", False, selector="LineSelector"),

      EnumerationNode("EventSelector", ["ExposureStart", "ExposureEnd", "Error"]),
      EnumerationNode("EventNotification", ["Off", "On"], selector="EventSelector"),

      EnumerationNode("LUTSelector", ["LUT1"]),
      BooleanNode("LUTEnable", False),
      IntegerNode("LUTIndex", 0, min=0, max=1023),
      IntegerNode("LUTValue", 0, min=0, max=1023, selector="LUTIndex"),

      EnumerationNode("SequencerMode", ["Off", "On"]),
      EnumerationNode("SequencerConfigurationMode", ["Off", "On"]),
      EnumerationNode("SequencerConfigurationValid", ["No", "Yes"], writable=False),
      IntegerNode("SequencerSetSelector", 0, min=0, max=31),
      IntegerNode("SequencerSetNext", 0, min=0, max=31, selector="SequencerSetSelector"),
      EnumerationNode("SequencerTriggerSource", ["Off", "FrameStart"], selector="SequencerSetSelector"),
      CommandNode("SequencerSetSave", on_execute=self.save_sequencer_set),
      enabled=False
    )

    if self.is_gige:
      nodemap.add(BooleanNode("GevGVCPHeartbeatDisable", False))

    return nodemap

  def value(self, name, nodemap=None):
    node = (nodemap or self.nodemap).GetNode(name)
    return None if node is None else node.get()

  def save_sequencer_set(self):
    index = self.value("SequencerSetSelector")
    self.sequencer_sets[index] = self.value("SequencerSetNext")
    self.nodemap.GetNode("SequencerConfigurationValid").put("Yes")

  # Camera interface

  def IsValid(self):
    return self.valid

  def IsInitialized(self):
    return self.initialized

  def IsStreaming(self):
    return self.streaming

  def Init(self):
    self.initialized = True
    self.init_count += 1
    self.nodemap.enabled = True

  def DeInit(self):
    if self.streaming:
      self.EndAcquisition()
    self.initialized = False
    self.nodemap.enabled = False

  def GetTLDeviceNodeMap(self):
    return self.tl_device_nodemap

  def GetTLStreamNodeMap(self):
    return self.stream_nodemap

  def GetNodeMap(self):
    return self.nodemap

  def BeginAcquisition(self):
    if not self.initialized:
      raise SpinnakerException("Camera is not initialized", -1002)
    if self.streaming:
      raise SpinnakerException("Camera is already streaming", -1002)

    self.stream_nodemap.GetNode("StreamBufferCountResult").put(self.stream_buffer_count())

    self.streaming = True
    self.acquisitions += 1
    self.buffers.clear()

    if len(self.image_handlers) > 0:
      self.event_thread = threading.Thread(target=self.deliver_images, daemon=True)
      self.event_thread.start()

  def stream_buffer_count(self):
    if self.buffer_ownership != BUFFER_OWNERSHIP_USER:
      return self.buffer_count()

    if self.user_buffers is None:
      raise SpinnakerException("Buffer ownership is user but no user buffers were set", -1002)

    count = self.user_buffer_total() // self.value("PayloadSize")
    if count < 1:
      raise SpinnakerException("User buffers are smaller than the payload size", -1002)
    return count

  def user_buffer_total(self):
    if len(self.user_buffers) == 2:
      return self.user_buffers[1]
    _, count, size = self.user_buffers
    return count * size

  def GetBufferOwnership(self):
    return self.buffer_ownership

  def SetBufferOwnership(self, ownership):
    if self.streaming:
      raise SpinnakerException("Buffer ownership can not be changed while streaming", -1002)
    self.buffer_ownership = ownership

  def SetUserBuffers(self, *args):
    """ Either (memory, total_size) for one contiguous block or (buffers, count, size)."""
    if self.streaming:
      raise SpinnakerException("User buffers can not be changed while streaming", -1002)

    if len(args) == 2:
      memory, total_size = args
      if memory.nbytes < total_size:
        raise SpinnakerException("User buffer memory is smaller than the given size", -1009)
    else:
      buffers, count, size = args
      if len(buffers) != count or any(buffer.nbytes < size for buffer in buffers):
        raise SpinnakerException("User buffers do not match the given count and size", -1009)

    self.user_buffers = args

  def EndAcquisition(self):
    if not self.streaming:
      raise SpinnakerException("Camera is not streaming", -1002)

    self.streaming = False
    if self.event_thread is not None and self.event_thread is not threading.current_thread():
      self.event_thread.join()
    self.event_thread = None

    with self.lock:
      self.buffers.clear()

  def is_triggered(self):
    return (self.value("TriggerMode") == "On"
      and self.value("TriggerSource") != "Counter0Start")

  def buffer_count(self):
    if self.value("StreamBufferCountMode", self.stream_nodemap) == "Manual":
      return self.value("StreamBufferCountManual", self.stream_nodemap)
    return 10

  def trigger(self):
    """ A frame arrives, which frames stay in the buffers depends on the handling mode."""
    if not self.streaming or not self.is_triggered():
      return

    image = self.produce()
    mode = self.value("StreamBufferHandlingMode", self.stream_nodemap)
    capacity = self.buffer_count()

    with self.lock:
      if mode == "NewestOnly":
        self.buffers.clear()
        self.buffers.append(image)
      elif mode == "OldestFirst":
        if len(self.buffers) < capacity:
          self.buffers.append(image)
      elif mode == "OldestFirstOverwrite":
        # One buffer is always held back for the incoming frame
        while len(self.buffers) >= max(capacity - 1, 1):
          self.buffers.popleft()
        self.buffers.append(image)
      else:
        while len(self.buffers) >= capacity:
          self.buffers.popleft()
        self.buffers.append(image)

  def GetNextImage(self, timeout=None):
    if not self.streaming:
      raise SpinnakerException("Camera is not started", -1002)

    if not self.is_triggered():
      return self.produce()

    with self.lock:
      if len(self.buffers) == 0:
        raise SpinnakerException("Failed waiting for EventData on NEW_BUFFER_DATA event", -1011)

      mode = self.value("StreamBufferHandlingMode", self.stream_nodemap)
      if mode in ("NewestFirst", "NewestOnly"):
        return self.buffers.pop()
      return self.buffers.popleft()

  def produce(self):
    with self.lock:
      self.frame_id += 1
      frame_id = self.frame_id

      active = self.sequencer_active
      if self.value("SequencerMode") == "On":
        self.sequencer_active = self.sequencer_sets.get(active, 0)

    self.device_event("EventExposureStart")

    chunk = None
    if self.value("ChunkModeActive"):
      chunk = dict(
        ExposureTime=self.value("ExposureTime"), FrameID=frame_id, Gain=self.value("Gain"),
        Height=self.value("Height"), OffsetX=self.value("OffsetX"), OffsetY=self.value("OffsetY"),
        SequencerSetActive=active, Timestamp=frame_id * 1000000, Width=self.value("Width"))

      for name in ["ExposureTime", "FrameID", "Timestamp"]:
        self.nodemap.GetNode(f"Chunk{name}").values[None] = chunk[name]

    image = FakeImage(self.value("Width"), self.value("Height"), frame_id,
      pixel_format=self.value("PixelFormat"), chunk=chunk,
      incomplete=frame_id in self.incomplete_frames)

    self.device_event("EventExposureEnd")
    return image

  def deliver_images(self):
    while self.streaming:
      image = self.produce()
      self.delivered.append(image)
      for handler in list(self.image_handlers):
        handler.OnImageEvent(image)
      time.sleep(0.002)

  def device_event(self, event_name):
    notification = self.nodemap.GetNode("EventNotification")
    if notification is None or notification.values.get(event_name[len("Event"):], "Off") != "On":
      return

    for handler, name in list(self.device_handlers):
      if name is None or name == event_name:
        handler.device_event_id = device_event_ids.get(event_name, 0)
        handler.device_event_name = event_name
        handler.OnDeviceEvent(event_name)

  def RegisterEventHandler(self, handler, event_name=None):
    if isinstance(handler, ImageEventHandler):
      self.image_handlers.append(handler)
    elif isinstance(handler, DeviceEventHandler):
      if event_name is not None and event_name not in device_event_ids:
        raise SpinnakerException(f"Unknown device event {event_name}", -1009)
      self.device_handlers.append((handler, event_name))
    else:
      raise SpinnakerException("Unsupported event handler", -1009)

  def UnregisterEventHandler(self, handler):
    if handler in self.image_handlers:
      self.image_handlers.remove(handler)
      return

    for entry in self.device_handlers:
      if entry[0] is handler:
        self.device_handlers.remove(entry)
        return
    raise SpinnakerException("Event handler is not registered", -1002)


class FakeCameraList():
  def __init__(self, system, cameras):
    self.system = system
    self.cameras = list(cameras)
    self.cleared = False
    system.open_lists += 1

  def GetSize(self):
    return len(self.cameras)

  def GetByIndex(self, index):
    return self.cameras[index]

  def Clear(self):
    if not self.cleared:
      self.cameras = []
      self.cleared = True
      self.system.open_lists -= 1


class FakeInterfaceList(FakeCameraList):
  pass


class FakeInterface():
  def __init__(self, interface_id, display_name="", cameras=()):
    self.interface_id = interface_id
    self.cameras = list(cameras)
    self.system = None
    self.handlers = []
    self.updates = 0

    self.tl_nodemap = FakeNodeMap(
      StringNode("InterfaceID", interface_id, writable=False),
      StringNode("InterfaceDisplayName", display_name or f"Interface {interface_id}", writable=False),
    )

  def GetTLNodeMap(self):
    return self.tl_nodemap

  def UpdateCameras(self):
    self.updates += 1

  def GetCameras(self):
    return FakeCameraList(self.system, self.cameras)

  def RegisterEventHandler(self, handler):
    self.handlers.append(handler)

  def UnregisterEventHandler(self, handler):
    if handler not in self.handlers:
      raise SpinnakerException("Event handler is not registered", -1002)
    self.handlers.remove(handler)


class LibraryVersion():
  def __init__(self, major, minor, type, build):
    self.major = major
    self.minor = minor
    self.type = type
    self.build = build


log_priorities = {
  "FATAL": 0, "ALERT": 100, "CRIT": 200, "ERROR": 300,
  "WARN": 400, "NOTICE": 500, "INFO": 600, "DEBUG": 700,
}


class LoggingEventData():
  def __init__(self, priority_name, message, category="SpinnakerCore"):
    self.priority_name = priority_name
    self.message = message
    self.category = category

  def GetCategoryName(self):
    return self.category

  def GetPriority(self):
    return log_priorities[self.priority_name]

  def GetPriorityName(self):
    return self.priority_name

  def GetTimestamp(self):
    return "2024-01-01 00:00:00,000"

  def GetNDC(self):
    return "(nil)"

  def GetThreadName(self):
    return threading.current_thread().name

  def GetLogMessage(self):
    return self.message


class FakeSystem():
  def __init__(self, interfaces, gev_enumeration=True):
    self.interfaces = []
    self.open_lists = 0
    self.released = False
    self.interface_updates = 0

    self.event_handlers = []
    self.interface_handlers = []
    self.logging_handlers = []
    self.log_level = log_priorities["NOTICE"]

    self.tl_nodemap = FakeNodeMap(BooleanNode("EnumerateGEVInterfaces", gev_enumeration))
    for interface in interfaces:
      interface.system = self
      self.interfaces.append(interface)

  @property
  def cameras(self):
    return [camera for interface in self.interfaces for camera in interface.cameras]

  def log(self, priority_name, message):
    if log_priorities[priority_name] > self.log_level:
      return
    for handler in list(self.logging_handlers):
      handler.OnLogEvent(LoggingEventData(priority_name, message))

  def GetLibraryVersion(self):
    return LibraryVersion(4, 0, 0, 116)

  def GetTLNodeMap(self):
    return self.tl_nodemap

  def GetCameras(self):
    self.log("DEBUG", "Enumerating cameras on all interfaces")
    cameras = FakeCameraList(self, self.cameras)
    self.log("INFO", f"{len(cameras.cameras)} cameras found")
    return cameras

  def GetInterfaces(self, update=True):
    return FakeInterfaceList(self, self.interfaces)

  def UpdateInterfaceList(self):
    self.interface_updates += 1

  def RegisterEventHandler(self, handler):
    self.event_handlers.append(handler)

  def UnregisterEventHandler(self, handler):
    self.event_handlers.remove(handler)

  def RegisterInterfaceEventHandler(self, handler):
    self.interface_handlers.append(handler)

  def UnregisterInterfaceEventHandler(self, handler):
    self.interface_handlers.remove(handler)

  def RegisterLoggingEventHandler(self, handler):
    self.logging_handlers.append(handler)

  def SetLoggingEventPriorityLevel(self, level):
    self.log_level = level

  def UnregisterLoggingEventHandler(self, handler):
    self.logging_handlers.remove(handler)

  def ReleaseInstance(self):
    if self.open_lists > 0:
      raise SpinnakerException("Can't clear a camera because something still holds a reference to the camera", -1004)
    self.released = True

  # Hot plugging

  def plug(self, camera, index=0):
    interface = self.interfaces[index]
    interface.cameras.append(camera)
    for handler in interface.handlers + self.interface_handlers:
      handler.OnDeviceArrival(camera)

  def unplug(self, camera):
    for interface in self.interfaces:
      if camera in interface.cameras:
        interface.cameras.remove(camera)
        camera.valid = False
        for handler in interface.handlers + self.interface_handlers:
          handler.OnDeviceRemoval(camera)

  def add_interface(self, interface):
    interface.system = self
    self.interfaces.append(interface)
    for handler in list(self.event_handlers):
      handler.OnInterfaceArrival(interface)

  def remove_interface(self, interface):
    self.interfaces.remove(interface)
    for handler in list(self.event_handlers):
      handler.OnInterfaceRemoval(interface)


class SystemSingleton():
  def __init__(self, system):
    self.system = system

  def GetInstance(self):
    return self.system


class FakeSpinnaker():
  """ Module level names of PySpin, with the system state of one test."""

  SpinnakerException = SpinnakerException

  intfIValue = intfIValue
  intfIBase = intfIBase
  intfIInteger = intfIInteger
  intfIBoolean = intfIBoolean
  intfICommand = intfICommand
  intfIFloat = intfIFloat
  intfIString = intfIString
  intfIRegister = intfIRegister
  intfICategory = intfICategory
  intfIEnumeration = intfIEnumeration
  intfIEnumEntry = intfIEnumEntry
  intfIPort = intfIPort

  ImageEventHandler = ImageEventHandler
  DeviceEventHandler = DeviceEventHandler
  InterfaceEventHandler = InterfaceEventHandler
  SystemEventHandler = SystemEventHandler
  LoggingEventHandler = LoggingEventHandler
  NodeCallback = NodeCallback

  AVIOption = AVIOption
  MJPGOption = MJPGOption
  H264Option = H264Option

  PixelFormat_Mono8 = "Mono8"
  PixelFormat_Mono16 = "Mono16"
  PixelFormat_BGR8 = "BGR8"

  SPINNAKER_COLOR_PROCESSING_ALGORITHM_HQ_LINEAR = 3
  SPINNAKER_COLOR_PROCESSING_ALGORITHM_NEAREST_NEIGHBOR = 1

  SPINNAKER_BUFFER_OWNERSHIP_SYSTEM = BUFFER_OWNERSHIP_SYSTEM
  SPINNAKER_BUFFER_OWNERSHIP_USER = BUFFER_OWNERSHIP_USER

  SPINNAKER_LOG_LEVEL_OFF = -1
  SPINNAKER_LOG_LEVEL_FATAL = 0
  SPINNAKER_LOG_LEVEL_ALERT = 100
  SPINNAKER_LOG_LEVEL_CRIT = 200
  SPINNAKER_LOG_LEVEL_ERROR = 300
  SPINNAKER_LOG_LEVEL_WARN = 400
  SPINNAKER_LOG_LEVEL_NOTICE = 500
  SPINNAKER_LOG_LEVEL_INFO = 600
  SPINNAKER_LOG_LEVEL_DEBUG = 700

  def __init__(self, cameras=(), interfaces=None, gev_enumeration=True):
    if interfaces is None:
      interfaces = [FakeInterface("USB0", "USB Interface", cameras)]

    self.system = FakeSystem(interfaces, gev_enumeration=gev_enumeration)
    self.System = SystemSingleton(self.system)

    self.processors = []
    self.videos = []
    self.node_callbacks = []

  @property
  def cameras(self):
    return self.system.cameras

  IsAvailable = staticmethod(is_available)
  IsReadable = staticmethod(is_readable)
  IsWritable = staticmethod(is_writable)

  CValuePtr = staticmethod(cast)
  CIntegerPtr = staticmethod(cast)
  CBooleanPtr = staticmethod(cast)
  CCommandPtr = staticmethod(cast)
  CFloatPtr = staticmethod(cast)
  CStringPtr = staticmethod(cast)
  CCategoryPtr = staticmethod(cast)
  CEnumerationPtr = staticmethod(cast)
  CEnumEntryPtr = staticmethod(cast)

  def ImageProcessor(self):
    processor = FakeImageProcessor()
    self.processors.append(processor)
    return processor

  def SpinVideo(self):
    video = FakeVideo()
    self.videos.append(video)
    return video

  def RegisterNodeCallback(self, node, callback):
    node.callbacks.append(callback)
    self.node_callbacks.append((node, callback))

  def DeregisterNodeCallback(self, callback):
    for node, registered in list(self.node_callbacks):
      if registered is callback:
        node.callbacks.remove(callback)
        self.node_callbacks.remove((node, registered))
        return
    raise SpinnakerException("Callback is not registered", -1002)
