"""Test configuration for the library catalog."""

from tests.fixtures import *  # noqa: F401,F403
