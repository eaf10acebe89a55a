from pathlib import Path
from beartype.typing import Optional

from beartype import beartype


def image_filename(prefix:str, index:int, serial:str="", extra:Optional[str]=None, extension:str="jpg") -> str:
  parts = [prefix]
  if serial != "":
    parts.append(serial)
  if extra is not None:
    parts.append(extra)
  parts.append(str(index))
  return "-".join(parts) + f".{extension}"


class ImageSaver():
  """ Converts SDK images to a common pixel format and writes them to disk."""

  @beartype
  def __init__(self, sdk, output_dir:str=".", pixel_format:str="Mono8",
               color_processing:str="HQ_LINEAR", extension:str="jpg"):
    self.sdk = sdk
    self.output_dir = Path(output_dir)
    self.extension = extension

    self.pixel_format = getattr(sdk, f"PixelFormat_{pixel_format}")

    self.processor = sdk.ImageProcessor()
    self.processor.SetColorProcessing(
      getattr(sdk, f"SPINNAKER_COLOR_PROCESSING_ALGORITHM_{color_processing}"))

  @staticmethod
  def from_settings(sdk, settings) -> 'ImageSaver':
    return ImageSaver(sdk, output_dir=settings.output_dir, pixel_format=settings.pixel_format,
                      color_processing=settings.color_processing, extension=settings.image_extension)

  def convert(self, image):
    return self.processor.Convert(image, self.pixel_format)

  def path(self, prefix:str, index:int, serial:str="", extra:Optional[str]=None) -> Path:
    return self.output_dir / image_filename(prefix, index, serial, extra, self.extension)

  def save(self, image, prefix:str, index:int, serial:str="", extra:Optional[str]=None) -> Path:
    """ Convert and save an image, returns the filename written."""
    filename = self.path(prefix, index, serial, extra)
    filename.parent.mkdir(parents=True, exist_ok=True)

    converted = self.convert(image)
    converted.Save(str(filename))
    return filename
