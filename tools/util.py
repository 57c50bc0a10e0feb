#!/usr/bin/env python3
# Copyright (C) 2025 The Xaya developers

"""
Some utility methods for the scripts.
"""

from errors import ConfigurationError

from decimal import Decimal

import os


def formatCoins (val, params):
  """
  Formats a coin value (in nanocoins) as decimal string with all
  decimal places of the network's base unit.
  """

  places = len (str (params.base)) - 1
  return format (Decimal (val) / params.base, ".%df" % places)


def expandHome (path, environ=None):
  """
  Expands a leading "~/" in the path to the user's home directory
  as given by $HOME.  Other paths are returned unchanged.
  """

  if environ is None:
    environ = os.environ

  if path == "~" or path.startswith ("~/"):
    home = environ.get ("HOME")
    if not home:
      raise ConfigurationError ("cannot expand %r: HOME is not set" % path)
    return home + path[1:]

  return path


def resolveChainPath (path, environ=None):
  """
  Expands the chain-data path given by the operator and makes sure that
  it exists, before anything tries to read chain data from it.
  """

  expanded = expandHome (path, environ)
  if not os.path.isdir (expanded):
    raise ConfigurationError (
        "Chain data not found at: %s\n"
        "Make sure the MWC node is running and fully synced.\n"
        "You can specify a custom path with --chain-path" % expanded)

  return expanded
