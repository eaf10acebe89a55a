from . import (
  enumeration,
  enumeration_events,
  acquisition,
  acquisition_multiple_camera,
  acquisition_multiple_thread,
  acquisition_user_buffer,
  buffer_handling,
  trigger,
  exposure,
  image_format_control,
  chunk_data,
  counter_and_timer,
  device_events,
  image_events,
  node_map_info,
  node_map_callback,
  lookup_table,
  sequencer,
  logging_events,
  exception_handling,
  save_to_video,
)


examples = {
  "enumeration": enumeration,
  "enumeration_events": enumeration_events,
  "acquisition": acquisition,
  "acquisition_multiple_camera": acquisition_multiple_camera,
  "acquisition_multiple_thread": acquisition_multiple_thread,
  "acquisition_user_buffer": acquisition_user_buffer,
  "buffer_handling": buffer_handling,
  "trigger": trigger,
  "exposure": exposure,
  "image_format_control": image_format_control,
  "chunk_data": chunk_data,
  "counter_and_timer": counter_and_timer,
  "device_events": device_events,
  "image_events": image_events,
  "node_map_info": node_map_info,
  "node_map_callback": node_map_callback,
  "lookup_table": lookup_table,
  "sequencer": sequencer,
  "logging_events": logging_events,
  "exception_handling": exception_handling,
  "save_to_video": save_to_video,
}


def example_summary(name:str) -> str:
  doc = examples[name].__doc__ or ""
  return doc.strip().split("\n")[0]


__all__ = ["examples", "example_summary"]
