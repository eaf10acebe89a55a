from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
from beartype import beartype

from omegaconf import OmegaConf


class StreamMode(Enum):
  TeledyneGigeVision = 0
  LWF = 1
  Socket = 2


class TriggerType(Enum):
  software = 0
  hardware = 1


class BufferHandlingMode(Enum):
  NewestFirst = 0
  NewestOnly = 1
  OldestFirst = 2
  OldestFirstOverwrite = 3


class ChunkDataSource(Enum):
  image = 0
  nodemap = 1


class EventRegistration(Enum):
  generic = 0
  specific = 1


class ReadType(Enum):
  value = 0
  individual = 1


class VideoType(Enum):
  uncompressed = 0
  mjpg = 1
  h264 = 2


class ExceptionType(Enum):
  spinnaker = 0
  standard = 1
  standard_cast = 2


@dataclass
class AcquisitionSettings:
  num_images: int = 10
  timeout_ms: int = 1000

  output_dir: str = "."
  image_extension: str = "jpg"

  # Pixel format images are converted to before saving
  pixel_format: str = "Mono8"
  color_processing: str = "HQ_LINEAR"

  # TeledyneGigeVision LWF Socket
  stream_mode: StreamMode = StreamMode.TeledyneGigeVision

  # Disable the GigE heartbeat while running (for debugging), reset afterwards
  disable_heartbeat: bool = False


@dataclass
class UserBufferSettings:
  num_buffers: int = 10

  # One block of memory for all buffers, otherwise one array per buffer
  contiguous: bool = True


@dataclass
class TriggerSettings:
  trigger_type: TriggerType = TriggerType.software
  hardware_source: str = "Line0"
  selector: str = "FrameStart"

  wait_for_keypress: bool = False


@dataclass
class BufferHandlingSettings:
  num_buffers: int = 3
  num_triggers: int = 6
  num_loops: int = 9

  timeout_ms: int = 500
  settle_sec: float = 1.0
  loop_interval_sec: float = 0.25

  modes: List[BufferHandlingMode] = field(default_factory=lambda: list(BufferHandlingMode))


@dataclass
class ExposureSettings:
  exposure_time_us: float = 2000000.0
  num_images: int = 5


@dataclass
class ImageFormatSettings:
  pixel_format: str = "Mono8"


@dataclass
class ChunkDataSettings:
  source: ChunkDataSource = ChunkDataSource.image


@dataclass
class CounterSettings:
  duration: int = 14000
  delay: int = 6000
  exposure_time_us: float = 5000.0


@dataclass
class DeviceEventSettings:
  registration: EventRegistration = EventRegistration.generic
  event_name: str = "EventExposureEnd"


@dataclass
class ImageEventSettings:
  wait_interval_sec: float = 0.2
  timeout_sec: float = 30.0


@dataclass
class NodeMapInfoSettings:
  read_type: ReadType = ReadType.value
  max_chars: int = 35


@dataclass
class LookupTableSettings:
  num_entries: int = 512


@dataclass
class SequencerSettings:
  num_sequences: int = 5
  exposure_time_max_us: float = 2000000.0


@dataclass
class VideoSettings:
  video_type: VideoType = VideoType.uncompressed
  max_file_size_mb: int = 2048

  mjpg_quality: int = 75
  h264_bitrate: int = 1000000


@dataclass
class LoggingSettings:
  # debug info notice warn error crit alert fatal off
  sdk_level: str = "debug"


@dataclass
class ExceptionSettings:
  exception_type: ExceptionType = ExceptionType.spinnaker


@dataclass
class EnumerationEventSettings:
  # Wait for enter to be pressed when zero
  duration_sec: float = 0.0


@beartype
@dataclass
class ExampleConfig:
  acquisition: AcquisitionSettings = field(default_factory=AcquisitionSettings)
  user_buffer: UserBufferSettings = field(default_factory=UserBufferSettings)
  trigger: TriggerSettings = field(default_factory=TriggerSettings)
  buffer_handling: BufferHandlingSettings = field(default_factory=BufferHandlingSettings)
  exposure: ExposureSettings = field(default_factory=ExposureSettings)
  image_format: ImageFormatSettings = field(default_factory=ImageFormatSettings)
  chunk_data: ChunkDataSettings = field(default_factory=ChunkDataSettings)
  counter: CounterSettings = field(default_factory=CounterSettings)
  device_events: DeviceEventSettings = field(default_factory=DeviceEventSettings)
  image_events: ImageEventSettings = field(default_factory=ImageEventSettings)
  node_map_info: NodeMapInfoSettings = field(default_factory=NodeMapInfoSettings)
  lookup_table: LookupTableSettings = field(default_factory=LookupTableSettings)
  sequencer: SequencerSettings = field(default_factory=SequencerSettings)
  video: VideoSettings = field(default_factory=VideoSettings)
  logging: LoggingSettings = field(default_factory=LoggingSettings)
  exceptions: ExceptionSettings = field(default_factory=ExceptionSettings)
  enumeration_events: EnumerationEventSettings = field(default_factory=EnumerationEventSettings)

  @staticmethod
  def load_yaml(*filenames, overrides:Optional[List[str]]=None) -> 'ExampleConfig':
    return load_structured(ExampleConfig, *filenames, overrides=overrides)


def load_structured(structure, *files, overrides:Optional[List[str]]=None):
   confs = [OmegaConf.load(file) for file in files]
   if overrides:
     confs.append(OmegaConf.from_dotlist(overrides))

   merged = OmegaConf.merge(OmegaConf.structured(structure), *confs)
   return OmegaConf.to_object(merged)


