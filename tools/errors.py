# Copyright (C) 2025 The Xaya developers

"""
Exceptions raised by the supply verifier.  Every one of them is terminal
for a verification run, since a partial sum has no meaning against the
supply equation.
"""


class VerifierError (RuntimeError):
  """
  Base class for all errors raised by the supply verifier.
  """


class ConfigurationError (VerifierError):
  """
  The operator's configuration (chain path or network) is invalid.
  """


class NotSyncedError (VerifierError):
  """
  Some piece of chain data (tip, block or header) could not be read.  This
  typically means the node is still syncing, but it may also be a corrupted
  database; we can't tell the two apart.
  """

  def __init__ (self, height, msg):
    super ().__init__ (msg)
    self.height = height


class BlockNotFound (NotSyncedError):

  def __init__ (self, height, detail=None):
    msg = "Block not found at height %s - node is still syncing" % height
    if detail is not None:
      msg += ": %s" % detail
    super ().__init__ (height, msg)


class HeaderNotFound (NotSyncedError):

  def __init__ (self, height, detail=None):
    msg = "Header not found at height %s - node is still syncing" % height
    if detail is not None:
      msg += ": %s" % detail
    super ().__init__ (height, msg)


class MalformedDataError (VerifierError):
  """
  Some data read from the chain (commitment, scalar) does not parse.
  This indicates on-disk corruption.
  """


class InvalidScalar (MalformedDataError):
  """
  A value or blinding factor is not a valid secp256k1 scalar.
  """


class SupplyMismatchError (VerifierError):
  """
  The two sides of the supply equation disagree.  This is the audit
  failure the tool exists to find, not a bug in the tool itself.
  """

  def __init__ (self, lhs, rhs, result=None):
    super ().__init__ (
        "SUPPLY MISMATCH DETECTED!\n"
        "LHS: %s\n"
        "RHS: %s\n"
        "This should never happen on a valid chain." % (lhs.hex (), rhs.hex ()))
    self.lhs = lhs
    self.rhs = rhs
    self.result = result
