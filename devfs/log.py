# SPDX-FileCopyrightText: 2026 - Canonical Ltd
# SPDX-License-Identifier: Apache-2.0

from oslo_config import cfg
from oslo_log import log as logging

PROJECT = "devfs"


def register_options(conf: cfg.ConfigOpts) -> None:
    """Register oslo.log options, tolerating repeated registration."""
    try:
        logging.register_options(conf)
    except cfg.ArgsAlreadyParsedError:
        pass


def setup_logging(conf: cfg.ConfigOpts, verbose: bool = False) -> None:
    """Configure logging for the devfs processes."""
    if verbose:
        conf.set_override("debug", True)
    logging.setup(conf, PROJECT)
