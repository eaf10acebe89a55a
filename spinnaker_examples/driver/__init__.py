from .interface import LibraryVersion, CameraInfo, SettingList
from .helpers import NodeMap, NodeException
from .camera import Camera
from .system import SpinSystem
from .sdk import load_sdk
from . import events


__all__ = [
    'LibraryVersion',
    'CameraInfo',
    'SettingList',
    'NodeMap',
    'NodeException',
    'Camera',
    'SpinSystem',
    'load_sdk',
    'events',
]
