from argparse import ArgumentParser
import logging
import sys

from omegaconf import OmegaConf

from spinnaker_examples.config import ExampleConfig
from spinnaker_examples.driver import SpinSystem, load_sdk
from spinnaker_examples.tutorials import examples, example_summary


logger = logging.getLogger("spinnaker_examples")


def parse_args(argv=None):
  parser = ArgumentParser(description="Run one of the Spinnaker tutorial programs")
  parser.add_argument("--example", type=str, choices=sorted(examples.keys()))
  parser.add_argument("--config", type=str, nargs='*', default=[],
                      help="yaml config files, merged in order")
  parser.add_argument("--set", type=str, nargs='*', default=[], dest="overrides",
                      help="config overrides e.g. acquisition.num_images=5")

  parser.add_argument("--log_level", type=str, default="info",
                      choices=["debug", "info", "warning", "error"])
  parser.add_argument("--list", action="store_true", help="list the available examples")

  args = parser.parse_args(argv)
  if not args.list and args.example is None:
    parser.error("--example is required (or --list)")
  return args


def run(example:str, config:ExampleConfig) -> bool:
  module = examples[example]
  sdk = load_sdk()

  system = SpinSystem(sdk, logger)
  try:
    logger.info(f"Library version: {system.library_version}")
    return module.main(system, config, logger)
  finally:
    system.release()


def main(argv=None):
  args = parse_args(argv)
  logging.basicConfig(level=getattr(logging, args.log_level.upper()), format='%(message)s')

  if args.list:
    for name in sorted(examples.keys()):
      print(f"{name:<30} {example_summary(name)}")
    return

  config = ExampleConfig.load_yaml(*args.config, overrides=args.overrides)
  logger.debug(OmegaConf.to_yaml(config))

  ok = run(args.example, config)
  logger.info(f"Example {args.example} {'complete' if ok else 'failed'}")
  sys.exit(0 if ok else 1)


if __name__ == '__main__':
  main()
