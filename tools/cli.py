# Copyright (C) 2025 The Xaya developers

"""
Command-line handling of the supply verifier (see verify-supply.py).
"""

import chaindata
import errors
import network
import report
import supply
import util

import argparse
import logging
import sys


logger = logging.getLogger (__name__)

# Exit codes for the different outcomes.  1 is left to the interpreter's
# own status for uncaught exceptions, so that a crash is never mistaken
# for a detected mismatch.
EXIT_VALID = 0
EXIT_CONFIG = 2
EXIT_ERROR = 3
EXIT_MISMATCH = 4


def buildParser ():
  parser = argparse.ArgumentParser (
      description="Cryptographically verify MWC supply integrity")
  parser.add_argument ("--chain-path", default=None,
                       help="Path to the chain data directory"
                            " (default depends on the network,"
                            " ~/.mwc/main/chain_data for mainnet)")
  parser.add_argument ("--network", default="mainnet",
                       choices=sorted (network.NETWORKS),
                       help="Network whose consensus rules to use")
  parser.add_argument ("--verbose", action="store_true",
                       help="Enable debug logging")
  return parser


def main (argv=None, out=None):
  """
  Runs the verifier with the given command-line arguments and returns
  the process exit code.
  """

  args = buildParser ().parse_args (argv)

  logging.basicConfig (
      level=logging.DEBUG if args.verbose else logging.WARNING,
      format="%(asctime)s - %(levelname)s - %(message)s")

  params = network.getNetwork (args.network)
  chainPath = args.chain_path
  if chainPath is None:
    chainPath = params.defaultChainPath

  reporter = report.ConsoleReporter (out)

  try:
    path = util.resolveChainPath (chainPath)
    reporter.start (path, params)
    store = chaindata.DumpChainStore (path, params)
    verifier = supply.SupplyVerifier (store, params, reporter)
    verifier.verify ()
  except errors.SupplyMismatchError as exc:
    reporter.mismatch (exc)
    return EXIT_MISMATCH
  except errors.ConfigurationError as exc:
    print ("Error: %s" % exc, file=sys.stderr)
    return EXIT_CONFIG
  except errors.VerifierError as exc:
    logger.debug ("Verification aborted", exc_info=True)
    print ("Error: %s" % exc, file=sys.stderr)
    return EXIT_ERROR

  return EXIT_VALID
