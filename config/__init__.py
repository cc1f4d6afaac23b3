# config package: authoritative source for all harness configuration.
#
# Sub-modules:
#   api_config.py    base URL, timeouts, retry budget, live-test switch
#
# Every constant can be overridden with an environment variable; see the
# module docstring of api_config.py for the full list.
