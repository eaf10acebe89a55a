from pydispatch import Dispatcher


class EventBridge(Dispatcher):
  """ Re-emits SDK callbacks as python-dispatch events.

  SDK handlers are subclasses of classes defined by the SDK module, so they
  are built by the factories below once the module is known.
  """
  _events_ = [
    "on_image",
    "on_device_event",
    "on_device_arrival",
    "on_device_removal",
    "on_interface_arrival",
    "on_interface_removal",
    "on_log_event",
    "on_node_update",
  ]


def image_event_handler(sdk, bridge:EventBridge):

  class ImageEventHandler(sdk.ImageEventHandler):
    def __init__(self):
      super(ImageEventHandler, self).__init__()

    def OnImageEvent(self, image):
      bridge.emit("on_image", image)

  return ImageEventHandler()


def device_event_handler(sdk, bridge:EventBridge):

  class DeviceEventHandler(sdk.DeviceEventHandler):
    def __init__(self):
      super(DeviceEventHandler, self).__init__()

    def OnDeviceEvent(self, event_name):
      bridge.emit("on_device_event", event_name,
                  event_id=self.GetDeviceEventId(), device_event_name=self.GetDeviceEventName())

  return DeviceEventHandler()


def interface_event_handler(sdk, bridge:EventBridge, interface_id:str=""):

  class InterfaceEventHandler(sdk.InterfaceEventHandler):
    def __init__(self):
      super(InterfaceEventHandler, self).__init__()
      self.interface_id = interface_id

    def OnDeviceArrival(self, camera):
      bridge.emit("on_device_arrival", camera, interface_id=self.interface_id)

    def OnDeviceRemoval(self, camera):
      bridge.emit("on_device_removal", camera, interface_id=self.interface_id)

  return InterfaceEventHandler()


def system_event_handler(sdk, bridge:EventBridge):

  class SystemEventHandler(sdk.SystemEventHandler):
    def __init__(self):
      super(SystemEventHandler, self).__init__()

    def OnInterfaceArrival(self, interface):
      bridge.emit("on_interface_arrival", interface)

    def OnInterfaceRemoval(self, interface):
      bridge.emit("on_interface_removal", interface)

  return SystemEventHandler()


def logging_event_handler(sdk, bridge:EventBridge):

  class LoggingEventHandler(sdk.LoggingEventHandler):
    def __init__(self):
      super(LoggingEventHandler, self).__init__()

    def OnLogEvent(self, logging_event_data):
      bridge.emit("on_log_event", logging_event_data)

  return LoggingEventHandler()


def node_callback(sdk, bridge:EventBridge, node_name:str):

  class NodeCallback(sdk.NodeCallback):
    def __init__(self):
      super(NodeCallback, self).__init__()

    def CallbackFunction(self, node):
      bridge.emit("on_node_update", node_name, node)

  return NodeCallback()
