# Copyright (C) 2025 The Xaya developers

"""
The actual supply verification.  It checks the equation

  sum (UTXO commitments) == sum (kernel excesses)
                            + offset * G + totalReward * H

where the offset is the total kernel offset of the tip and totalReward
the coinbase issuance of all blocks up to and including the tip.  If
this holds, every coin in the UTXO set is backed either by a transaction
kernel or by the block rewards, i.e. nothing was created out of thin air.

Both sides are computed against a single header (the "pinned" tip),
which is read once at the start.
"""

from commitments import commit, commitValue, sumCommitments
from errors import MalformedDataError, SupplyMismatchError
from report import Reporter

import logging


logger = logging.getLogger (__name__)

# Interval (in blocks) at which progress of the chain walk is reported.
PROGRESS_INTERVAL = 100_000


class SupplyAccumulator:
  """
  Computes the two commitment sums (UTXOs and kernel excesses) for the
  chain state at a given header.  The number of visited outputs, blocks
  and kernels is recorded on the instance for reporting.
  """

  def __init__ (self, chain, header, reporter=None,
                progressInterval=PROGRESS_INTERVAL):
    self.chain = chain
    self.header = header
    self.reporter = reporter if reporter is not None else Reporter ()
    self.progressInterval = progressInterval

    self.utxoCount = 0
    self.blockCount = 0
    self.kernelCount = 0

  def countedOutputs (self):
    for c in self.chain.enumerateUnspentOutputsAt (self.header):
      self.utxoCount += 1
      yield c

  def sumUtxos (self):
    """
    Sums up all unspent outputs at the pinned header.  The output set is
    streamed, so it is never held in memory completely.
    """

    self.utxoCount = 0
    total = sumCommitments (self.countedOutputs ())
    logger.debug ("Summed %d UTXOs", self.utxoCount)

    return total

  def blockExcesses (self):
    """
    Walks the chain from the pinned header back to the genesis block
    and yields the excess of every kernel on the way.  Any block or header
    that can't be retrieved aborts the walk (the accessor's exception
    is passed on as is).
    """

    walk = self.header
    walking = True
    while walking:
      block = self.chain.getBlock (walk)
      self.blockCount += 1

      for k in block.kernels:
        self.kernelCount += 1
        yield k["excess"]

      if walk.height > 0 and walk.height % self.progressInterval == 0:
        self.reporter.progress (walk.height)

      if walk.height == 0:
        walking = False
      else:
        parent = self.chain.getParentHeader (walk)
        if parent.height != walk.height - 1:
          raise MalformedDataError (
              "parent of %r has height %d" % (walk, parent.height))
        walk = parent

  def sumKernelExcesses (self):
    """
    Sums up all kernel excesses from the pinned header down to and
    including the genesis block.
    """

    self.blockCount = 0
    self.kernelCount = 0
    total = sumCommitments (self.blockExcesses ())
    logger.debug ("Summed %d kernels in %d blocks",
                  self.kernelCount, self.blockCount)

    return total


def evaluateEquation (lhs, excessSum, offset, height, params):
  """
  Builds the right-hand side of the supply equation from the kernel
  excess sum, the total kernel offset (32 bytes) and the total reward
  at the given height, and compares it against lhs.

  Returns a dict with the computed values and "valid" set to whether
  or not the equation holds.  If the offset is not a valid scalar,
  InvalidScalar is raised.
  """

  offsetCommitment = commit (0, offset)

  totalReward = params.totalReward (height)
  rewardCommitment = commitValue (totalReward)

  rhs = sumCommitments ([excessSum, offsetCommitment, rewardCommitment])

  return {
    "valid": lhs == rhs,
    "lhs": lhs,
    "rhs": rhs,
    "excessSum": excessSum,
    "offsetCommitment": offsetCommitment,
    "rewardCommitment": rewardCommitment,
    "totalReward": totalReward,
  }


class SupplyVerifier:
  """
  Runs the full verification against a chain:  Pins the tip, computes
  both sums and evaluates the supply equation.
  """

  def __init__ (self, chain, params, reporter=None,
                progressInterval=PROGRESS_INTERVAL):
    self.chain = chain
    self.params = params
    self.reporter = reporter if reporter is not None else Reporter ()
    self.progressInterval = progressInterval

  def verify (self):
    """
    Performs the verification.  Returns the result dict (see
    evaluateEquation, with some more data added) if the supply is valid,
    and raises SupplyMismatchError if it is not.  Errors accessing the
    chain data are passed on.
    """

    pinned = self.chain.getTipHeader ()
    self.reporter.pinned (pinned)
    logger.info ("Verifying supply at height %d (%s)",
                 pinned.height, pinned.hash)

    acc = SupplyAccumulator (self.chain, pinned, self.reporter,
                             self.progressInterval)

    self.reporter.step (1, "Collecting UTXO commitments...")
    lhs = acc.sumUtxos ()
    self.reporter.utxos (acc.utxoCount, pinned.height)

    self.reporter.step (2,
        "Collecting kernel excesses (walking chain to genesis)...")
    excessSum = acc.sumKernelExcesses ()
    self.reporter.kernels (acc.kernelCount, acc.blockCount)

    self.reporter.step (3, "Computing offset and reward commitments...")
    result = evaluateEquation (lhs, excessSum, pinned.totalKernelOffset,
                               pinned.height, self.params)
    self.reporter.reward (result["totalReward"], pinned.height, self.params)

    self.reporter.step (4, "Verifying supply equation...")
    result.update ({
      "height": pinned.height,
      "hash": pinned.hash,
      "utxoCount": acc.utxoCount,
      "blockCount": acc.blockCount,
      "kernelCount": acc.kernelCount,
    })
    self.reporter.equation (result["lhs"], result["rhs"])

    if not result["valid"]:
      logger.error ("Supply mismatch at height %d", pinned.height)
      raise SupplyMismatchError (result["lhs"], result["rhs"], result)

    self.reporter.valid (result)
    return result
