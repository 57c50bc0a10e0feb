# Copyright (C) 2025 The Xaya developers

"""
Reporting of a supply verification run to the operator.
"""

import util

import sys


class Reporter:
  """
  Receives notifications about the progress and outcome of a verification.
  This base class ignores all of them; it is what gets used when nothing
  should be printed.
  """

  def start (self, chainPath, params):
    pass

  def pinned (self, header):
    pass

  def step (self, num, text):
    pass

  def utxos (self, count, height):
    pass

  def progress (self, height):
    pass

  def kernels (self, kernelCount, blockCount):
    pass

  def reward (self, totalReward, height, params):
    pass

  def equation (self, lhs, rhs):
    pass

  def valid (self, result):
    pass

  def mismatch (self, exc):
    pass


class ConsoleReporter (Reporter):
  """
  Prints a human-readable report to a text stream (stdout by default).
  """

  def __init__ (self, out=None):
    self.out = out
    self.coinName = "MWC"

  def write (self, line=""):
    print (line, file=self.out if self.out is not None else sys.stdout)

  def start (self, chainPath, params):
    self.coinName = params.coinName
    self.write ("%s Supply Verifier" % params.coinName)
    self.write ("===================")
    self.write ()
    self.write ("Network: %s" % params.name)
    self.write ("Opening chain store at: %s" % chainPath)

  def pinned (self, header):
    self.write ("Pinned tip height: %d" % header.height)
    self.write ()

  def step (self, num, text):
    self.write ("Step %d: %s" % (num, text))

  def utxos (self, count, height):
    self.write ("  Collected %d UTXOs at height %d" % (count, height))

  def progress (self, height):
    self.write ("  ... at height %d" % height)

  def kernels (self, kernelCount, blockCount):
    self.write ("  Collected %d kernel excesses from %d blocks"
                % (kernelCount, blockCount))

  def reward (self, totalReward, height, params):
    self.write ("  Total reward at height %d: %s %s"
                % (height, util.formatCoins (totalReward, params),
                   params.coinName))

  def equation (self, lhs, rhs):
    self.write ()
    self.write ("Supply Equation:")
    self.write ("  ΣUTXO == Σkernels + offset·G + reward·H")
    self.write ()
    self.write ("  LHS (ΣUTXO):          %s" % lhs.hex ())
    self.write ("  RHS (Σkern+off+rew):  %s" % rhs.hex ())
    self.write ()

  def valid (self, result):
    self.write ("RESULT: %s supply is valid!" % self.coinName)
    self.write ()
    self.write ("This cryptographically proves that no %s were created"
                " out of thin air." % self.coinName)
    self.write ("Every coin in existence is backed by either:")
    self.write ("  - A valid transaction kernel, or")
    self.write ("  - The coinbase block reward")

  def mismatch (self, exc):
    self.write ("RESULT: SUPPLY MISMATCH DETECTED!")
    self.write ("  LHS: %s" % exc.lhs.hex ())
    self.write ("  RHS: %s" % exc.rhs.hex ())
    self.write ("This should never happen on a valid chain.")
