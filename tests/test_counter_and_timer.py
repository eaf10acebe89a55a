import pytest

from spinnaker_examples.config import CounterSettings
from spinnaker_examples.driver import SpinSystem
from spinnaker_examples.tutorials import counter_and_timer

from .fake_spinnaker import FakeCamera, FakeSpinnaker


def test_duty_cycle_and_pulse_rate():
  assert counter_and_timer.duty_cycle(14000, 6000) == 70
  assert counter_and_timer.pulse_rate(14000, 6000) == 50
  assert counter_and_timer.duty_cycle(1, 2) == 33


@pytest.mark.parametrize("model, family", [
  ("Blackfly S BFS-U3-16S2M", "BFS"),
  ("Oryx ORX-10G-51S5M", "ORX"),
  ("Grasshopper3 GS3-U3-23S6M", ""),
])
def test_camera_family(model, family):
  assert counter_and_timer.camera_family(model) == family


def test_counter_settings():
  settings = counter_and_timer.counter_settings(CounterSettings(duration=100, delay=50))
  assert {"CounterDuration": 100} in settings
  assert {"CounterDelay": 50} in settings
  assert settings[0] == {"CounterSelector": "Counter0"}


def line_value(camera, line, name):
  camera.nodemap.GetNode("LineSelector").put(line)
  return camera.nodemap.GetNode(name).get()


def test_blackfly_s(camera, system, config, logger):
  assert counter_and_timer.main(system, config, logger)

  nodemap = camera.nodemap
  assert nodemap.GetNode("CounterDuration").get() == 14000
  assert nodemap.GetNode("CounterDelay").get() == 6000
  assert nodemap.GetNode("CounterTriggerSource").get() == "FrameTriggerWait"
  assert nodemap.GetNode("TriggerSource").get() == "Counter0Start"
  assert nodemap.GetNode("TriggerOverlap").get() == "ReadOut"
  assert nodemap.GetNode("ExposureTime").get() == 5000.0
  assert nodemap.GetNode("TriggerMode").get() == "Off"

  assert line_value(camera, "Line1", "LineSource") == "Counter0Active"
  assert line_value(camera, "Line2", "V3_3Enable") is True


def test_oryx(config, logger):
  camera = FakeCamera(model="Oryx ORX-10G-51S5M")
  with SpinSystem(FakeSpinnaker([camera]), logger) as system:
    assert counter_and_timer.main(system, config, logger)

  assert line_value(camera, "Line2", "LineMode") == "Output"
  assert line_value(camera, "Line2", "LineSource") == "Counter0Active"


def test_unknown_family(config, logger):
  camera = FakeCamera(model="Grasshopper3 GS3-U3-23S6M")
  with SpinSystem(FakeSpinnaker([camera]), logger) as system:
    assert counter_and_timer.main(system, config, logger)

  assert line_value(camera, "Line0", "LineSource") == "Counter0Active"
