"""Shared fixtures: a synthetic chain that satisfies the supply equation."""

import csv
import hashlib
import json
import os
import secrets

import pytest

import chaindata
import network
from commitments import CURVE_ORDER, commit
from errors import BlockNotFound, HeaderNotFound, NotSyncedError


# Small reward schedule so that halvings happen within a few blocks.
TEST_PARAMS = network.NetworkParameters (
    "testing", genesisReward=1000, firstGroupReward=64, blocksPerGroup=4,
    defaultChainPath="~/.mwc/test/chain_data")


def randomScalar () -> int:
  return secrets.randbelow (CURVE_ORDER - 1) + 1


def makeKernel (features: str, excessScalar: int) -> dict:
  return {
    "features": features,
    "fee": 0,
    "excess": commit (0, excessScalar),
  }


class SyntheticChain (chaindata.ChainAccess):
  """
  In-memory chain with known outputs and kernels.  Every block after the
  genesis spends the oldest unspent output into two new ones, and every
  block has a coinbase output.  The per-block kernel offset is taken out
  of the coinbase kernel's excess, so that the chain balances exactly
  like a real one.
  """

  def __init__ (self, params, height):
    self.params = params
    self.headers = {}
    self.blocks = {}
    self.byHeight = {}
    # (value, blinding) of all unspent outputs.
    self.outputs = []
    # Commitments added to the UTXO set without any backing.
    self.extraOutputs = []

    self.blockRequests = []
    self.headerRequests = []
    self.enumerations = 0

    totalOffset = 0
    prevHash = None
    header = None
    for h in range (height + 1):
      offset = randomScalar ()
      totalOffset = (totalOffset + offset) % CURVE_ORDER
      kernels = []

      if self.outputs:
        value, rIn = self.outputs.pop (0)
        a = value // 3
        ra, rb = randomScalar (), randomScalar ()
        self.outputs.extend ([(a, ra), (value - a, rb)])
        kernels.append (makeKernel ("Plain", (ra + rb - rIn) % CURVE_ORDER))

      rc = randomScalar ()
      self.outputs.append ((params.blockReward (h), rc))
      kernels.append (makeKernel ("Coinbase", (rc - offset) % CURVE_ORDER))

      seed = ("%d:%s" % (h, prevHash)).encode ()
      hashHex = hashlib.sha256 (seed).hexdigest ()
      header = chaindata.Header (h, hashHex, prevHash,
                                 totalOffset.to_bytes (32, "big"))

      self.headers[hashHex] = header
      self.blocks[hashHex] = chaindata.Block (header, kernels)
      self.byHeight[h] = header
      prevHash = hashHex

    self.tip = header

  def removeBlock (self, height):
    del self.blocks[self.byHeight[height].hash]

  def removeHeader (self, height):
    del self.headers[self.byHeight[height].hash]

  def getTipHeader (self):
    return self.tip

  def enumerateUnspentOutputsAt (self, header):
    if header != self.tip:
      raise NotSyncedError (header.height, "not the tip")
    self.enumerations += 1
    return self.iterOutputs ()

  def iterOutputs (self):
    for value, blinding in self.outputs:
      yield commit (value, blinding)
    for c in self.extraOutputs:
      yield c

  def getBlock (self, header):
    self.blockRequests.append (header.height)
    if header.hash not in self.blocks:
      raise BlockNotFound (header.height)
    return self.blocks[header.hash]

  def getParentHeader (self, header):
    self.headerRequests.append (header.height - 1)
    if header.prevHash not in self.headers:
      raise HeaderNotFound (header.height - 1)
    return self.headers[header.prevHash]


def headerJson (header) -> dict:
  return {
    "height": header.height,
    "hash": header.hash,
    "prev_hash": header.prevHash,
    "total_kernel_offset": header.totalKernelOffset.hex (),
  }


def writeDump (chain, path, chainType=None) -> str:
  """Exports a synthetic chain in the format DumpChainStore reads."""
  os.makedirs (os.path.join (path, "headers"), exist_ok=True)
  os.makedirs (os.path.join (path, "blocks"), exist_ok=True)

  head = headerJson (chain.tip)
  if chainType is not None:
    head["chain_type"] = chainType
  with open (os.path.join (path, "head.json"), "w") as f:
    json.dump (head, f)

  for hashHex, header in chain.headers.items ():
    with open (os.path.join (path, "headers", "%s.json" % hashHex), "w") as f:
      json.dump (headerJson (header), f)

  for hashHex, block in chain.blocks.items ():
    obj = {
      "hash": hashHex,
      "height": block.header.height,
      "kernels": [
        {"features": k["features"], "fee": k["fee"],
         "excess": k["excess"].hex ()}
        for k in block.kernels
      ],
    }
    with open (os.path.join (path, "blocks", "%s.json" % hashHex), "w") as f:
      json.dump (obj, f)

  with open (os.path.join (path, "outputs.csv"), "w", newline="") as f:
    writer = csv.writer (f)
    writer.writerow (["commitment"])
    for c in chain.iterOutputs ():
      writer.writerow ([c.hex ()])

  return str (path)


@pytest.fixture
def chain () -> SyntheticChain:
  return SyntheticChain (TEST_PARAMS, 10)


@pytest.fixture
def mainnetChain () -> SyntheticChain:
  return SyntheticChain (network.MAINNET, 6)


@pytest.fixture
def dumpDir (tmp_path, mainnetChain) -> str:
  return writeDump (mainnetChain, str (tmp_path / "chain_data"))
