#!/usr/bin/env python3
# Copyright (C) 2025 The Xaya developers

"""
This script verifies the total coin supply of an MWC chain from a synced
node's chain data, by checking that the sum of all UTXO commitments equals
the sum of all kernel excesses plus the total kernel offset and the total
block reward issued so far.
"""

import cli

import sys


sys.exit (cli.main ())
