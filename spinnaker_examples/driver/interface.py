from dataclasses import dataclass
from typing import List
from beartype.typing import Dict, Any

from beartype import beartype


SettingList = List[Dict[str, Any]]


@beartype
@dataclass
class LibraryVersion:
  major: int
  minor: int
  type: int
  build: int

  def __str__(self):
    return f"{self.major}.{self.minor}.{self.type}.{self.build}"


@beartype
@dataclass
class CameraInfo:
  serial: str
  vendor: str = ""
  model: str = ""

  def __repr__(self):
    return f"CameraInfo({self.serial} {self.vendor} {self.model})"
