# Copyright (C) 2025 The Xaya developers

"""
Read-only access to the chain data the supply verification needs:  The
tip header, the UTXO set at the tip, blocks (for their kernels) and
the parent link between headers.

ChainAccess describes the interface the verifier relies upon.  The
actual implementation here, DumpChainStore, reads a chain-data directory
exported from a synced node:

  head.json             the tip header
  headers/<hash>.json   one file per header
  blocks/<hash>.json    the kernels of each block
  outputs.csv           the UTXO set at the tip, one commitment per row

Headers are JSON objects with the fields "height", "hash", "prev_hash"
(null for the genesis block) and "total_kernel_offset" (hex).  head.json
may in addition contain "chain_type", which must then match the network
we verify against.  Blocks have "hash", "height" and "kernels", a list
of objects with "features", "fee" and "excess" (hex commitment).
"""

from commitments import Commitment, decodeHex
from errors import (
  BlockNotFound,
  ConfigurationError,
  HeaderNotFound,
  MalformedDataError,
  NotSyncedError,
)

import csv
import json
import logging
import os


logger = logging.getLogger (__name__)


class Header:
  """
  An immutable block header with just the fields we need.
  """

  __slots__ = ("height", "hash", "prevHash", "totalKernelOffset")

  def __init__ (self, height, hash, prevHash, totalKernelOffset):
    object.__setattr__ (self, "height", height)
    object.__setattr__ (self, "hash", hash)
    object.__setattr__ (self, "prevHash", prevHash)
    object.__setattr__ (self, "totalKernelOffset", totalKernelOffset)

  def __setattr__ (self, name, value):
    raise AttributeError ("headers are immutable")

  def __eq__ (self, other):
    if not isinstance (other, Header):
      return NotImplemented
    return self.hash == other.hash and self.height == other.height

  def __hash__ (self):
    return hash ((self.height, self.hash))

  def __repr__ (self):
    return "Header(%d, %s)" % (self.height, self.hash)


class Block:
  """
  A block as far as we care about it, i.e. its header and kernels.  Each
  kernel is a dict with "features", "fee" and "excess", where the excess
  is a Commitment.
  """

  def __init__ (self, header, kernels):
    self.header = header
    self.kernels = kernels


class ChainAccess:
  """
  Interface for reading chain data.  All methods fail loudly (with a
  NotSyncedError subclass) rather than silently omitting data.
  """

  def getTipHeader (self):
    """
    Returns the current tip header.
    """
    raise NotImplementedError ()

  def enumerateUnspentOutputsAt (self, header):
    """
    Returns an iterable of the commitments of all unspent outputs
    at exactly the given header.
    """
    raise NotImplementedError ()

  def getBlock (self, header):
    """
    Returns the full block for the given header (looked up by its hash).
    Raises BlockNotFound if it is not available.
    """
    raise NotImplementedError ()

  def getParentHeader (self, header):
    """
    Returns the header of the parent of the given header.  Raises
    HeaderNotFound if it is not available.
    """
    raise NotImplementedError ()


def parseHash (val, what):
  try:
    data = decodeHex (val, "hash")
  except MalformedDataError as exc:
    raise MalformedDataError ("%s: %s" % (what, exc)) from exc
  if len (data) != 32:
    raise MalformedDataError ("%s: hash must be 32 bytes" % what)
  return data.hex ()


def parseHeader (obj, what):
  """
  Converts a header JSON object into a Header instance.  The kernel offset
  is only decoded to bytes here; whether it is a valid scalar is checked
  when it is actually used.
  """

  try:
    height = obj["height"]
    hashHex = obj["hash"]
    prevHex = obj["prev_hash"]
    offsetHex = obj["total_kernel_offset"]
  except (KeyError, TypeError) as exc:
    raise MalformedDataError ("%s: incomplete header" % what) from exc

  if isinstance (height, bool) or not isinstance (height, int) or height < 0:
    raise MalformedDataError ("%s: invalid height %r" % (what, height))

  if prevHex is None:
    if height != 0:
      raise MalformedDataError ("%s: missing prev_hash at height %d"
                                % (what, height))
    prevHash = None
  else:
    prevHash = parseHash (prevHex, what)

  try:
    offset = decodeHex (offsetHex, "kernel offset")
  except MalformedDataError as exc:
    raise MalformedDataError ("%s: %s" % (what, exc)) from exc

  return Header (height, parseHash (hashHex, what), prevHash, offset)


class DumpChainStore (ChainAccess):
  """
  ChainAccess implementation based on an exported chain-data directory
  (see the module docstring for the layout).  The head is read once
  when the store is opened, so that everything afterwards refers to the
  same chain state.
  """

  def __init__ (self, path, params=None):
    """
    Opens the store at the given directory.  If network parameters are
    given and the head specifies a chain type, the two must match.
    """

    self.path = path
    logger.debug ("Opening chain store at %s", path)

    headFile = os.path.join (path, "head.json")
    try:
      with open (headFile, "r", encoding="utf-8") as f:
        head = json.load (f)
    except (OSError, ValueError) as exc:
      raise NotSyncedError (
          None,
          "Could not read chain head: %s\n"
          "The node may still be syncing."
          " Supply verification requires a fully synced node." % exc) from exc

    self.head = parseHeader (head, headFile)

    chainType = head.get ("chain_type")
    if params is not None and chainType is not None \
        and chainType != params.name:
      raise ConfigurationError ("chain data is for %s, but verifying %s"
                                % (chainType, params.name))

    logger.debug ("Chain head: %r", self.head)

  def loadJson (self, subdir, hashHex):
    """
    Loads the JSON file for the given hash from a subdirectory.  Returns
    None if the file does not exist.  A file that exists but can't be read
    or decoded is MalformedDataError.
    """

    fileName = os.path.join (self.path, subdir, "%s.json" % hashHex)
    try:
      with open (fileName, "r", encoding="utf-8") as f:
        return fileName, json.load (f)
    except FileNotFoundError:
      return fileName, None
    except (OSError, ValueError) as exc:
      raise MalformedDataError ("%s: %s" % (fileName, exc)) from exc

  def getTipHeader (self):
    return self.head

  def enumerateUnspentOutputsAt (self, header):
    # We only have the UTXO snapshot at the head.
    if header.hash != self.head.hash:
      raise NotSyncedError (
          header.height,
          "UTXO set is only available at the head %r, not at %r"
              % (self.head, header))

    return self.readOutputs ()

  def readOutputs (self):
    """
    Generator yielding the commitments from the UTXO dump, reading
    the file row by row.
    """

    fileName = os.path.join (self.path, "outputs.csv")
    try:
      f = open (fileName, "r", encoding="utf-8", newline="")
    except OSError as exc:
      raise NotSyncedError (self.head.height,
                            "UTXO set not readable: %s" % exc) from exc

    with f:
      reader = csv.DictReader (f)
      try:
        if reader.fieldnames is None \
            or "commitment" not in reader.fieldnames:
          raise MalformedDataError ("%s: no commitment column" % fileName)

        for row in reader:
          try:
            c = Commitment.fromHex (row["commitment"])
          except MalformedDataError as exc:
            raise MalformedDataError ("%s:%d: %s"
                                      % (fileName, reader.line_num, exc)) \
                from exc
          yield c
      except (UnicodeDecodeError, csv.Error) as exc:
        raise MalformedDataError ("%s:%d: %s"
                                  % (fileName, reader.line_num + 1, exc)) \
            from exc

  def getBlock (self, header):
    fileName, obj = self.loadJson ("blocks", header.hash)
    if obj is None:
      raise BlockNotFound (header.height, "%s does not exist" % fileName)

    if not isinstance (obj, dict):
      raise MalformedDataError ("%s: block must be an object" % fileName)
    if obj.get ("height") != header.height \
        or parseHash (obj.get ("hash"), fileName) != header.hash:
      raise MalformedDataError ("%s: block does not match %r"
                                % (fileName, header))

    rawKernels = obj.get ("kernels", [])
    if not isinstance (rawKernels, list):
      raise MalformedDataError ("%s: kernels must be a list" % fileName)

    kernels = []
    for k in rawKernels:
      if not isinstance (k, dict):
        raise MalformedDataError ("%s: kernel must be an object" % fileName)
      try:
        excess = Commitment.fromHex (k["excess"])
      except KeyError as exc:
        raise MalformedDataError ("%s: kernel without excess"
                                  % fileName) from exc
      except MalformedDataError as exc:
        raise MalformedDataError ("%s: %s" % (fileName, exc)) from exc
      kernels.append ({
        "features": k.get ("features"),
        "fee": k.get ("fee", 0),
        "excess": excess,
      })

    return Block (header, kernels)

  def getParentHeader (self, header):
    if header.prevHash is None:
      raise HeaderNotFound (header.height - 1,
                            "%r has no parent" % header)

    fileName, obj = self.loadJson ("headers", header.prevHash)
    if obj is None:
      raise HeaderNotFound (header.height - 1,
                            "%s does not exist" % fileName)

    parent = parseHeader (obj, fileName)
    if parent.hash != header.prevHash:
      raise MalformedDataError ("%s: hash mismatch" % fileName)

    return parent
