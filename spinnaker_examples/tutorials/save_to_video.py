""" Record converted images into memory, then write them out as a video with SpinVideo.

Uncompressed, MJPG and H264 AVI files are supported, the frame rate is taken
from the camera's AcquisitionFrameRate.
"""
from functools import partial
from logging import Logger
import logging
from pathlib import Path

from beartype.typing import List

from spinnaker_examples.config import ExampleConfig, VideoSettings, VideoType
from spinnaker_examples.driver import Camera, SpinSystem
from spinnaker_examples.image import ImageSaver

from . import common


video_names = {
  VideoType.uncompressed: "Uncompressed",
  VideoType.mjpg: "MJPG",
  VideoType.h264: "H264",
}


def video_filename(output_dir:str, video_type:VideoType, serial:str="") -> str:
  name = f"SaveToAvi-{video_names[video_type]}"
  if serial != "":
    name = f"{name}-{serial}"
  return str(Path(output_dir) / name)


def video_option(sdk, settings:VideoSettings, frame_rate:float, width:int, height:int):
  if settings.video_type == VideoType.uncompressed:
    option = sdk.AVIOption()
  elif settings.video_type == VideoType.mjpg:
    option = sdk.MJPGOption()
    option.quality = settings.mjpg_quality
  else:
    option = sdk.H264Option()
    option.bitrate = settings.h264_bitrate
    option.width = width
    option.height = height

  option.frameRate = frame_rate
  return option


@common.step
def acquire_images(camera:Camera, saver:ImageSaver, images:List, num_images:int, timeout_ms:int):
  camera.logger.info("*** IMAGE ACQUISITION ***")
  camera.set_acquisition_mode("Continuous")

  with camera.acquisition():
    camera.log(logging.INFO, "Acquiring images...")
    for i, image in camera.grab_images(num_images, timeout_ms):
      camera.log(logging.INFO, f"Grabbed image {i}, width = {image.GetWidth()}, height = {image.GetHeight()}")
      # Converted images own their data, unlike the buffer they came from
      images.append(saver.convert(image))

  return camera.errors == 0


@common.step
def save_list_to_video(camera:Camera, images:List, settings:VideoSettings, output_dir:str):
  camera.logger.info("*** CREATING VIDEO ***")
  if len(images) == 0:
    camera.log(logging.ERROR, "No images to save")
    return False

  frame_rate = float(camera.nodemap.get_value("AcquisitionFrameRate"))
  camera.log(logging.INFO, f"Frame rate to be set to {frame_rate}")

  filename = video_filename(output_dir, settings.video_type, camera.serial)
  option = video_option(camera.sdk, settings, frame_rate,
    width=images[0].GetWidth(), height=images[0].GetHeight())

  video = camera.sdk.SpinVideo()
  video.SetMaximumFileSize(settings.max_file_size_mb)
  video.Open(filename, option)
  try:
    camera.log(logging.INFO, f"Appending {len(images)} images to video file {filename}.avi...")
    for i, image in enumerate(images):
      video.Append(image)
      camera.logger.debug(f"Appended image {i}...")
  finally:
    video.Close()

  camera.log(logging.INFO, "Video saved")


def run_single_camera(camera:Camera, config:ExampleConfig, saver:ImageSaver) -> bool:
  settings = config.acquisition
  result = camera.log_device_info()

  images = []
  with camera.initialized():
    result &= acquire_images(camera, saver, images, settings.num_images, settings.timeout_ms)
    result &= save_list_to_video(camera, images, config.video, settings.output_dir)

  return result


def main(system:SpinSystem, config:ExampleConfig, logger:Logger) -> bool:
  saver = ImageSaver.from_settings(system.sdk, config.acquisition)
  return common.run_each_camera(system, logger,
    partial(run_single_camera, config=config, saver=saver),
    output_dir=config.acquisition.output_dir)
