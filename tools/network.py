# Copyright (C) 2025 The Xaya developers

"""
Consensus parameters of the networks we can verify, in particular the
coinbase reward schedule.  Instead of selecting a network globally, an
instance of NetworkParameters is passed explicitly to everything that
depends on it.
"""

from errors import ConfigurationError


class NetworkParameters:
  """
  Immutable set of parameters for one network.  All amounts are in
  nanocoins (the smallest unit).

  The reward schedule is: genesisReward for the genesis block (height 0),
  and for every later block firstGroupReward halved once for every
  blocksPerGroup blocks since the genesis, until it reaches zero.
  """

  __slots__ = ("name", "genesisReward", "firstGroupReward", "blocksPerGroup",
               "base", "coinName", "defaultChainPath")

  def __init__ (self, name, genesisReward, firstGroupReward, blocksPerGroup,
                base=1_000_000_000, coinName="MWC",
                defaultChainPath="~/.mwc/main/chain_data"):
    if blocksPerGroup <= 0:
      raise ValueError ("blocksPerGroup must be positive")

    object.__setattr__ (self, "name", name)
    object.__setattr__ (self, "genesisReward", genesisReward)
    object.__setattr__ (self, "firstGroupReward", firstGroupReward)
    object.__setattr__ (self, "blocksPerGroup", blocksPerGroup)
    object.__setattr__ (self, "base", base)
    object.__setattr__ (self, "coinName", coinName)
    object.__setattr__ (self, "defaultChainPath", defaultChainPath)

  def __setattr__ (self, name, value):
    raise AttributeError ("NetworkParameters are immutable")

  def __repr__ (self):
    return "NetworkParameters(%s)" % self.name

  def blockReward (self, height):
    """
    Returns the coinbase reward of the block at the given height.
    """

    if height < 0:
      raise ValueError ("negative height: %d" % height)
    if height == 0:
      return self.genesisReward

    group = (height - 1) // self.blocksPerGroup
    return self.firstGroupReward >> group

  def totalReward (self, height):
    """
    Returns the total issuance of all blocks from the genesis up to
    and including the given height.  This is computed per halving group,
    so it does not depend on the height linearly.
    """

    if height < 0:
      raise ValueError ("negative height: %d" % height)

    total = self.genesisReward
    remaining = height
    reward = self.firstGroupReward
    while remaining > 0 and reward > 0:
      blocks = min (remaining, self.blocksPerGroup)
      total += blocks * reward
      remaining -= blocks
      reward >>= 1

    return total


# 10M coins premined in the genesis block (plus the genesis coinbase),
# then 2.38 coins per block halving every 2.1M blocks (about four years
# at one block per minute).
MAINNET = NetworkParameters (
    "mainnet",
    genesisReward=10_000_000_041_800_000,
    firstGroupReward=2_380_952_380,
    blocksPerGroup=2_100_000)

FLOONET = NetworkParameters (
    "floonet",
    genesisReward=10_000_000_041_800_000,
    firstGroupReward=2_380_952_380,
    blocksPerGroup=2_100_000,
    defaultChainPath="~/.mwc/floo/chain_data")

NETWORKS = {p.name: p for p in [MAINNET, FLOONET]}


def getNetwork (name):
  """
  Looks up the parameters of a network by its name.
  """

  if name not in NETWORKS:
    raise ConfigurationError ("unknown network %r (known: %s)"
                              % (name, ", ".join (sorted (NETWORKS))))

  return NETWORKS[name]
