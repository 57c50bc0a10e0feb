# Copyright (C) 2025 The Xaya developers

"""
Pedersen commitments on secp256k1, i.e. points of the form

  value * H + blinding * G

with G the standard generator and H the "nothing up my sleeve" generator
used by secp256k1-zkp.  The supply verification only relies on these being
homomorphic, so this module just provides point addition, negation and
the construction of commitments to known values / blinding factors.

All actual curve arithmetic is done by coincurve (libsecp256k1).  The only
thing coincurve can't represent is the point at infinity, which we need
as the neutral element for sums; that is handled here explicitly.
"""

from errors import InvalidScalar, MalformedDataError

from web3 import Web3

import coincurve

import hmac


# Order of the secp256k1 group.
CURVE_ORDER = (
    0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141)

# Prime of the field over which secp256k1 is defined.
FIELD_PRIME = (
    0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F)

# Size in bytes of a serialised commitment.
COMMITMENT_SIZE = 33

# The value generator H of secp256k1-zkp (same point as the NUMS point
# of BIP 341).  Its y coordinate is even.
GENERATOR_H = coincurve.PublicKey (bytes.fromhex (
    "02"
    "50929b74c1a04954b78b4b6035e97a5e078a5a0f28ec96d547bfee9ace803ac0"))

# Prefix bytes of the secp256k1-zkp Pedersen commitment encoding.  The
# prefix does not encode the parity of y, but whether or not y is a
# quadratic residue modulo the field prime.
PREFIX_QUAD = 0x08
PREFIX_NONQUAD = 0x09


def isQuadraticResidue (val):
  """
  Returns true if the given nonzero field element is a square.
  """

  return pow (val, (FIELD_PRIME - 1) // 2, FIELD_PRIME) == 1


def decodeHex (hexstr, what):
  """
  Decodes a hex string (with or without 0x prefix) to bytes.  Unlike
  Web3.to_bytes itself, this rejects odd-length strings instead of
  padding them, so that truncated fields are not silently accepted.
  """

  if not isinstance (hexstr, str):
    raise MalformedDataError ("%s must be a hex string, got %r"
                              % (what, hexstr))

  digits = hexstr[2:] if hexstr[:2] in ["0x", "0X"] else hexstr
  if len (digits) % 2 != 0:
    raise MalformedDataError ("%s hex %r has odd length" % (what, hexstr))

  try:
    return Web3.to_bytes (hexstr=hexstr)
  except ValueError as exc:
    raise MalformedDataError ("invalid %s hex %r: %s"
                              % (what, hexstr, exc)) from exc


def toScalar (val):
  """
  Converts a value or blinding factor given as int or as 32 big-endian
  bytes into an integer in [0, n).  Raises InvalidScalar if that is not
  possible.  Zero is allowed here, as it is fine as value or blinding
  factor of a commitment.
  """

  if isinstance (val, (bytes, bytearray)):
    if len (val) != 32:
      raise InvalidScalar ("scalar must be 32 bytes, got %d" % len (val))
    val = int.from_bytes (val, "big")
  elif isinstance (val, bool) or not isinstance (val, int):
    raise InvalidScalar ("scalar must be int or bytes, got %r" % type (val))

  if val < 0 or val >= CURVE_ORDER:
    raise InvalidScalar ("scalar out of range: %x" % val)

  return val


class Commitment:
  """
  A Pedersen commitment, i.e. a point on secp256k1 or the point at
  infinity (the neutral element for sums).  Instances are immutable.
  """

  def __init__ (self, point=None):
    """
    Constructs a commitment from a coincurve.PublicKey.  If point is None,
    the commitment is the identity.  Use the module-level functions or
    fromBytes/fromHex to construct commitments instead of calling this
    directly.
    """

    self._point = point
    if point is None:
      self._compressed = None
    else:
      self._compressed = point.format (compressed=True)

  @classmethod
  def identity (cls):
    return cls (None)

  @classmethod
  def fromBytes (cls, data):
    """
    Parses a commitment from its 33-byte secp256k1-zkp serialisation.
    """

    data = bytes (data)
    if len (data) != COMMITMENT_SIZE:
      raise MalformedDataError ("commitment must be %d bytes, got %d"
                                % (COMMITMENT_SIZE, len (data)))
    if data[0] not in [PREFIX_QUAD, PREFIX_NONQUAD]:
      raise MalformedDataError ("invalid commitment prefix %02x" % data[0])

    x = int.from_bytes (data[1:], "big")
    if x >= FIELD_PRIME:
      raise MalformedDataError ("commitment x coordinate out of range")

    # Since p = 3 mod 4, the square root (if any) is a^((p+1)/4).
    rhs = (pow (x, 3, FIELD_PRIME) + 7) % FIELD_PRIME
    y = pow (rhs, (FIELD_PRIME + 1) // 4, FIELD_PRIME)
    if y * y % FIELD_PRIME != rhs:
      raise MalformedDataError ("commitment %s is not on the curve"
                                % data.hex ())

    if not isQuadraticResidue (y):
      y = FIELD_PRIME - y
    if data[0] == PREFIX_NONQUAD:
      y = FIELD_PRIME - y

    compressed = bytes ([0x02 | (y & 1)]) + data[1:]
    return cls (coincurve.PublicKey (compressed))

  @classmethod
  def fromHex (cls, hexstr):
    return cls.fromBytes (decodeHex (hexstr, "commitment"))

  def isIdentity (self):
    return self._point is None

  def serialize (self):
    """
    Returns the 33-byte secp256k1-zkp encoding of the commitment.  The
    identity has no such encoding and is rendered as all zeros.
    """

    if self._point is None:
      return b"\0" * COMMITMENT_SIZE

    _, y = self._point.point ()
    if isQuadraticResidue (y):
      prefix = PREFIX_QUAD
    else:
      prefix = PREFIX_NONQUAD

    return bytes ([prefix]) + self._compressed[1:]

  def hex (self):
    return self.serialize ().hex ()

  def __neg__ (self):
    if self._point is None:
      return self

    flipped = bytes ([self._compressed[0] ^ 0x01]) + self._compressed[1:]
    return Commitment (coincurve.PublicKey (flipped))

  def __add__ (self, other):
    if not isinstance (other, Commitment):
      return NotImplemented

    if self._point is None:
      return other
    if other._point is None:
      return self

    # libsecp256k1 refuses to return the point at infinity, so we have
    # to catch P + (-P) ourselves.
    if self._compressed[1:] == other._compressed[1:] \
        and self._compressed[0] != other._compressed[0]:
      return Commitment.identity ()

    return Commitment (
        coincurve.PublicKey.combine_keys ([self._point, other._point]))

  def __sub__ (self, other):
    if not isinstance (other, Commitment):
      return NotImplemented
    return self + (-other)

  def __eq__ (self, other):
    if not isinstance (other, Commitment):
      return NotImplemented
    return hmac.compare_digest (self.serialize (), other.serialize ())

  def __hash__ (self):
    return hash (self.serialize ())

  def __repr__ (self):
    return "Commitment(%s)" % self.hex ()


def multiplyGenerator (generator, scalar):
  """
  Returns scalar * generator as Commitment, where generator is either
  None (for G) or a coincurve.PublicKey.
  """

  if scalar == 0:
    return Commitment.identity ()

  data = scalar.to_bytes (32, "big")
  if generator is None:
    return Commitment (coincurve.PublicKey.from_secret (data))

  return Commitment (generator.multiply (data))


def commit (value, blinding=None):
  """
  Commits to the given value with the given blinding factor, which can
  be an int or 32 bytes.  If no blinding factor is passed, a fresh random
  one is used.
  """

  if blinding is None:
    blinding = coincurve.PrivateKey ().secret

  v = toScalar (value)
  r = toScalar (blinding)

  return multiplyGenerator (GENERATOR_H, v) + multiplyGenerator (None, r)


def commitValue (value):
  """
  Commits to a public value with zero blinding factor, i.e. returns
  value * H.  The result is deterministic.
  """

  return commit (value, 0)


def sumCommitments (positive, negative=()):
  """
  Computes the homomorphic sum of all commitments in positive minus
  all commitments in negative.  Both can be arbitrary iterables, which
  are consumed in a single pass.  The sum of nothing is the identity.
  """

  total = Commitment.identity ()
  for c in positive:
    total += c
  for c in negative:
    total -= c

  return total
